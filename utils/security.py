"""
security helpers:
- Argon2 password hashing via argon2-cffi
- access / refresh token codecs (JWTs signed with HS256 via PyJWT)
- duration parsing for token lifetimes ("15m", "7d", ...)

Each token kind is signed with its own secret type (AccessSecret / RefreshSecret),
so an access token never verifies as a refresh token and vice versa.
"""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, ClassVar, Dict, Optional, Union

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from flask import current_app

logger = logging.getLogger(__name__)

ph = PasswordHasher()

DEFAULT_ACCESS_LIFETIME = timedelta(minutes=15)
DEFAULT_REFRESH_LIFETIME = timedelta(days=7)

_DURATION_RE = re.compile(r"^(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 60 * 60, "d": 24 * 60 * 60}


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return ph.hash(uuid.uuid4().hex)


def burn_password_check(password: str) -> None:
    """Spend the same work as a real verification when there is no user to check against."""
    verify_password(password, _dummy_hash())


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def parse_duration(value: Optional[str], default: timedelta) -> timedelta:
    """
    Parse "<int><unit>" where unit is one of s, m, h, d.
    Missing or unrecognized values fall back to `default` instead of failing startup.
    """
    if value is None:
        return default
    match = _DURATION_RE.match(str(value).strip())
    if not match:
        logger.warning("Unrecognized token lifetime %r, using default %s", value, default)
        return default
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _UNIT_SECONDS[unit])


class TokenError(Exception):
    """Raised when a token cannot be verified."""


class InvalidSignature(TokenError):
    pass


class TokenExpired(TokenError):
    pass


class MalformedToken(TokenError):
    pass


@dataclass(frozen=True)
class AccessSecret:
    value: str = field(repr=False)
    kind: ClassVar[str] = "access"


@dataclass(frozen=True)
class RefreshSecret:
    value: str = field(repr=False)
    kind: ClassVar[str] = "refresh"


Secret = Union[AccessSecret, RefreshSecret]


@dataclass(frozen=True)
class TokenPayload:
    user_id: str
    email: str

    def to_claims(self) -> Dict[str, Any]:
        return {"userId": self.user_id, "email": self.email}


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, handed explicitly to every resource service call."""

    user_id: str
    email: str


class TokenCodec:
    """Signs and verifies one kind of token with that kind's secret and lifetime."""

    def __init__(self, secret: Secret, lifetime: timedelta, algorithm: str = "HS256"):
        if not isinstance(secret, (AccessSecret, RefreshSecret)):
            raise TypeError("secret must be an AccessSecret or a RefreshSecret")
        self._secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm

    @property
    def kind(self) -> str:
        return self._secret.kind

    def issue(self, payload: TokenPayload) -> str:
        issued_at = _now()
        claims = {
            **payload.to_claims(),
            "type": self.kind,
            "jti": generate_jti(),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(claims, self._secret.value, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        """
        Decode and validate a token of this codec's kind.
        Raises InvalidSignature, TokenExpired or MalformedToken.
        """
        try:
            decoded = jwt.decode(
                token,
                self._secret.value,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired("Token expired") from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature("Signature verification failed") from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedToken(f"Invalid token: {exc}") from exc

        if decoded.get("type") != self.kind:
            raise InvalidSignature("Wrong token type")
        user_id, email = decoded.get("userId"), decoded.get("email")
        if not user_id or not email:
            raise MalformedToken("Token is missing identity claims")
        return TokenPayload(user_id=str(user_id), email=email)


@dataclass(frozen=True)
class TokenCodecs:
    access: TokenCodec
    refresh: TokenCodec

    def __post_init__(self):
        if self.access.kind != "access" or self.refresh.kind != "refresh":
            raise TypeError("access and refresh codecs are swapped")

    @classmethod
    def from_config(cls, config) -> "TokenCodecs":
        access_secret = config["JWT_ACCESS_SECRET"]
        refresh_secret = config["JWT_REFRESH_SECRET"]
        if not access_secret or not refresh_secret:
            raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be set")
        if access_secret == refresh_secret:
            raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")

        algorithm = config.get("JWT_ALGORITHM", "HS256")
        return cls(
            access=TokenCodec(
                AccessSecret(access_secret),
                parse_duration(config.get("ACCESS_TOKEN_EXPIRY"), DEFAULT_ACCESS_LIFETIME),
                algorithm,
            ),
            refresh=TokenCodec(
                RefreshSecret(refresh_secret),
                parse_duration(config.get("REFRESH_TOKEN_EXPIRY"), DEFAULT_REFRESH_LIFETIME),
                algorithm,
            ),
        )


def get_token_codecs() -> TokenCodecs:
    """Codecs built by create_app() for the current application."""
    return current_app.extensions["token_codecs"]
