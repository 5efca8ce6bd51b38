"""
Refresh token ledger.

Signed refresh tokens are stateless, so the ledger is what makes them revocable:
a refresh token only works while a matching, unexpired row exists here.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from models import storage
from models.base_model import utcnow
from models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)


def record(user_id: str, token: str, lifetime: timedelta) -> RefreshToken:
    """Persist a freshly issued refresh token with its absolute expiry."""
    entry = RefreshToken(token=token, user_id=user_id, expires_at=utcnow() + lifetime)
    storage.new(entry)
    storage.save()
    return entry


def find(token: str) -> Optional[RefreshToken]:
    session = storage.get_session()
    return session.query(RefreshToken).filter(RefreshToken.token == token).first()


def discard(entry: RefreshToken) -> None:
    """Delete a stale entry found past its expiry."""
    storage.delete(entry)
    storage.save()
    logger.info("Discarded expired refresh token for user %s", entry.user_id)


def revoke(token: str) -> int:
    """
    Delete every entry matching `token`. Deleting an absent token is a no-op,
    so concurrent or repeated logouts are safe. Returns the number of rows removed.
    """
    session = storage.get_session()
    removed = (
        session.query(RefreshToken)
        .filter(RefreshToken.token == token)
        .delete(synchronize_session=False)
    )
    storage.save()
    return removed
