"""
Authentication service: register / login / refresh / logout.

Session lineage per login:
    Anonymous -> Authenticated(access, refresh)
              -> Authenticated(access', refresh)   (refresh mints access tokens only)
              -> Revoked                            (logout deletes the ledger entry)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from models import storage
from models.user import User
from services import refresh_ledger
from services.exceptions import Conflict, Unauthorized
from utils.security import (
    TokenCodecs,
    TokenError,
    TokenPayload,
    burn_password_check,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"


@dataclass
class AuthResult:
    user: User
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(self, tokens: TokenCodecs):
        self.tokens = tokens

    def register(self, email: str, password: str, name: str) -> AuthResult:
        session = storage.get_session()
        if session.query(User).filter(User.email == email).first():
            raise Conflict("User with this email already exists")

        user = User(email=email, password_hash=hash_password(password), name=name)
        storage.new(user)
        try:
            storage.save()
        except IntegrityError:
            # lost a race with a concurrent registration of the same email
            raise Conflict("User with this email already exists")

        logger.info("Registered user %s", user.id)
        return self._start_session(user)

    def login(self, email: str, password: str) -> AuthResult:
        session = storage.get_session()
        user = session.query(User).filter(User.email == email).first()
        if user is None:
            burn_password_check(password)
            logger.info("Login failed: unknown email")
            raise Unauthorized(INVALID_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            logger.info("Login failed for user %s", user.id)
            raise Unauthorized(INVALID_CREDENTIALS)

        return self._start_session(user)

    def refresh(self, refresh_token: str) -> str:
        """Mint a new access token. The refresh token itself is not rotated."""
        try:
            payload = self.tokens.refresh.verify(refresh_token)
        except TokenError as exc:
            logger.info("Refresh rejected: %s", exc)
            raise Unauthorized(INVALID_REFRESH_TOKEN) from exc

        entry = refresh_ledger.find(refresh_token)
        if entry is None:
            raise Unauthorized(INVALID_REFRESH_TOKEN)
        if entry.is_expired():
            refresh_ledger.discard(entry)
            raise Unauthorized(INVALID_REFRESH_TOKEN)

        return self.tokens.access.issue(payload)

    def logout(self, refresh_token: str) -> None:
        """Never fails: the only goal is that the token stops working."""
        removed = refresh_ledger.revoke(refresh_token)
        logger.info("Logout removed %d refresh token(s)", removed)

    def _start_session(self, user: User) -> AuthResult:
        payload = TokenPayload(user_id=user.id, email=user.email)
        access_token = self.tokens.access.issue(payload)
        refresh_token = self.tokens.refresh.issue(payload)
        refresh_ledger.record(user.id, refresh_token, self.tokens.refresh.lifetime)
        return AuthResult(user=user, access_token=access_token, refresh_token=refresh_token)
