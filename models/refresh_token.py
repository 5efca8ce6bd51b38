"""
RefreshToken model: the ledger of issued refresh tokens, so a token can be revoked
before its own expiry claim runs out.
Fields:
- token (unique) - the signed refresh token string as handed to the client
- user_id (String(36)) - FK to users.id
- expires_at - absolute expiry, checked on every refresh
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from models.base_model import BaseModel, Base, as_utc, utcnow


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(1024), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    def is_expired(self, now=None) -> bool:
        return as_utc(self.expires_at) < (now or utcnow())

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} expires_at={self.expires_at}>"
