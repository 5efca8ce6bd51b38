"""Authentication service: register / login / refresh / logout."""

from datetime import timedelta

import pytest

from models import storage
from models.base_model import utcnow
from models.refresh_token import RefreshToken
from services import refresh_ledger
from services.exceptions import Conflict, Unauthorized
from utils.security import TokenPayload

from tests.conftest import PASSWORD


# ═══════════════════════════════════════════════════════════
# Register / login
# ═══════════════════════════════════════════════════════════


def test_register_returns_user_and_token_pair(auth_service, codecs):
    result = auth_service.register("alice@test.com", PASSWORD, "Alice")

    assert result.user.email == "alice@test.com"
    assert result.user.password_hash != PASSWORD
    assert codecs.access.verify(result.access_token).user_id == result.user.id
    assert codecs.refresh.verify(result.refresh_token).email == "alice@test.com"
    assert refresh_ledger.find(result.refresh_token) is not None


def test_register_duplicate_email(auth_service):
    auth_service.register("alice@test.com", PASSWORD, "Alice")
    with pytest.raises(Conflict):
        auth_service.register("alice@test.com", "another1", "Alice Again")


def test_email_uniqueness_is_case_sensitive(auth_service):
    auth_service.register("alice@test.com", PASSWORD, "Alice")
    result = auth_service.register("Alice@test.com", PASSWORD, "Other Alice")
    assert result.user.email == "Alice@test.com"


def test_login_after_register_yields_new_pair(auth_service):
    registered = auth_service.register("alice@test.com", PASSWORD, "Alice")
    logged_in = auth_service.login("alice@test.com", PASSWORD)

    assert logged_in.user.id == registered.user.id
    assert logged_in.access_token != registered.access_token
    assert logged_in.refresh_token != registered.refresh_token


def test_each_login_is_a_separate_session(auth_service):
    auth_service.register("alice@test.com", PASSWORD, "Alice")
    auth_service.login("alice@test.com", PASSWORD)
    auth_service.login("alice@test.com", PASSWORD)

    assert storage.get_session().query(RefreshToken).count() == 3


def test_login_failures_are_indistinguishable(auth_service):
    auth_service.register("alice@test.com", PASSWORD, "Alice")

    with pytest.raises(Unauthorized) as wrong_password:
        auth_service.login("alice@test.com", "wrong-password")
    with pytest.raises(Unauthorized) as unknown_email:
        auth_service.login("nobody@test.com", PASSWORD)

    assert wrong_password.value.message == unknown_email.value.message
    assert wrong_password.value.status_code == unknown_email.value.status_code == 401


# ═══════════════════════════════════════════════════════════
# Refresh / logout
# ═══════════════════════════════════════════════════════════


def test_refresh_mints_new_access_token_only(auth_service, codecs):
    result = auth_service.register("alice@test.com", PASSWORD, "Alice")

    access = auth_service.refresh(result.refresh_token)

    assert access != result.access_token
    assert codecs.access.verify(access) == TokenPayload(result.user.id, "alice@test.com")
    # refresh token is not rotated
    assert refresh_ledger.find(result.refresh_token) is not None


def test_refresh_fails_once_ledger_entry_is_gone(auth_service):
    result = auth_service.register("alice@test.com", PASSWORD, "Alice")
    refresh_ledger.revoke(result.refresh_token)

    with pytest.raises(Unauthorized):
        auth_service.refresh(result.refresh_token)


def test_refresh_with_expired_ledger_entry_discards_it(auth_service):
    result = auth_service.register("alice@test.com", PASSWORD, "Alice")
    entry = refresh_ledger.find(result.refresh_token)
    entry.expires_at = utcnow() - timedelta(seconds=1)
    storage.save()

    with pytest.raises(Unauthorized):
        auth_service.refresh(result.refresh_token)
    assert refresh_ledger.find(result.refresh_token) is None


def test_refresh_rejects_unsigned_garbage(auth_service):
    with pytest.raises(Unauthorized):
        auth_service.refresh("not-a-token")


def test_refresh_rejects_access_token(auth_service, codecs):
    result = auth_service.register("alice@test.com", PASSWORD, "Alice")
    with pytest.raises(Unauthorized):
        auth_service.refresh(result.access_token)


def test_refresh_rejects_payload_signed_as_access(auth_service, codecs):
    result = auth_service.register("alice@test.com", PASSWORD, "Alice")
    forged = codecs.access.issue(TokenPayload(result.user.id, "alice@test.com"))
    # even with a ledger row for that exact string, the signature kind is wrong
    refresh_ledger.record(result.user.id, forged, timedelta(days=7))

    with pytest.raises(Unauthorized):
        auth_service.refresh(forged)


def test_logout_is_idempotent(auth_service):
    result = auth_service.register("alice@test.com", PASSWORD, "Alice")

    auth_service.logout(result.refresh_token)
    auth_service.logout(result.refresh_token)

    with pytest.raises(Unauthorized):
        auth_service.refresh(result.refresh_token)


def test_logout_with_unknown_token_succeeds(auth_service):
    auth_service.logout("never-issued")


def test_session_lifecycle(auth_service):
    registered = auth_service.register("alice@test.com", PASSWORD, "Alice")
    a1, r1 = registered.access_token, registered.refresh_token

    a2 = auth_service.refresh(r1)
    assert a2 != a1

    auth_service.logout(r1)
    with pytest.raises(Unauthorized):
        auth_service.refresh(r1)
