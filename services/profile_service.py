from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from models import storage
from models.user import User
from services.exceptions import Conflict, NotFound
from utils.security import Identity

EMAIL_IN_USE = "Email is already in use"


def get_profile(identity: Identity) -> User:
    user = storage.get(User, identity.user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(identity: Identity, data: dict) -> User:
    """Change name and/or email. Outstanding access tokens keep the old email until they expire."""
    user = get_profile(identity)

    email = data.get("email")
    if email and email != user.email:
        session = storage.get_session()
        taken = (
            session.query(User)
            .filter(User.email == email, User.id != user.id)
            .first()
        )
        if taken:
            raise Conflict(EMAIL_IN_USE)
        user.email = email

    if "name" in data:
        user.name = data["name"]

    try:
        user.save()
    except IntegrityError:
        raise Conflict(EMAIL_IN_USE)
    return user
