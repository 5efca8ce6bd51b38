from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import request

from services.exceptions import Unauthorized
from utils.security import Identity, TokenCodec, TokenError, get_token_codecs

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def resolve_identity(authorization: Optional[str], codec: TokenCodec) -> Identity:
    """
    Turn an Authorization header into the caller's Identity.
    Only access tokens are accepted; the refresh ledger is never consulted.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized("Access token required")

    token = authorization[len(BEARER_PREFIX):].strip()
    try:
        payload = codec.verify(token)
    except TokenError as exc:
        logger.debug("Access token rejected: %s", exc)
        raise Unauthorized("Invalid or expired access token") from exc
    return Identity(user_id=payload.user_id, email=payload.email)


def jwt_required():
    """
    Reject the request with 401 unless it carries a valid access token.
    The resolved Identity is passed to the view as the `identity` keyword argument.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            identity = resolve_identity(
                request.headers.get("Authorization"), get_token_codecs().access
            )
            return fn(*args, identity=identity, **kwargs)

        return wrapper

    return decorator
