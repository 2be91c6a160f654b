import threading
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from address_book_api.app.core.errors import (
    EmailAlreadyRegistered,
    EmailDeliveryError,
    InvalidCredentials,
    InvalidOrExpiredToken,
    UserNotFound,
)
from address_book_api.app.core.security import TokenService, verify_password
from address_book_api.app.repositories.credential_repository import CredentialRepository
from address_book_api.app.services.auth_service import REGISTER_SUCCESS_MESSAGE, AuthService
from address_book_api.app.services.notification_service import USER_REGISTERED, NotificationPublisher


class Clock:
    def __init__(self):
        self.now = datetime(2025, 3, 16, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def users(db_path):
    return CredentialRepository(db_path)


@pytest.fixture
def auth(users, settings, email_service, redis_client, clock):
    return AuthService(
        users=users,
        tokens=TokenService(settings),
        email_service=email_service,
        publisher=NotificationPublisher(redis_client),
        clock=clock,
    )


def test_register_hashes_password(auth, users):
    assert auth.register("Vanshita", "vanshita@example.com", "Vanshita123") == REGISTER_SUCCESS_MESSAGE
    stored = users.get_by_email("vanshita@example.com")
    assert stored.password_hash != "Vanshita123"
    assert verify_password("Vanshita123", stored.password_hash)
    assert stored.reset_token is None


def test_register_publishes_user_registered(auth, redis_client):
    auth.register("A", "a@b.com", "pw")
    assert redis_client.llen(USER_REGISTERED) == 1


def test_register_rejects_duplicate_email(auth):
    auth.register("A", "a@b.com", "pw")
    with pytest.raises(EmailAlreadyRegistered):
        auth.register("B", "a@b.com", "other")


def test_login_returns_token_with_email_claim(auth):
    auth.register("A", "a@b.com", "pw")
    token = auth.login("a@b.com", "pw")
    assert token
    assert jwt.get_unverified_claims(token)["email"] == "a@b.com"


@pytest.mark.parametrize("email,password", [("a@b.com", "wrong"), ("nobody@b.com", "pw"), ("", "")])
def test_login_failures_raise_invalid_credentials(auth, email, password):
    auth.register("A", "a@b.com", "pw")
    with pytest.raises(InvalidCredentials):
        auth.login(email, password)


def test_forgot_password_stores_token_for_one_hour_and_emails_it(auth, users, email_service, clock):
    auth.register("A", "a@b.com", "pw")
    auth.forgot_password("a@b.com")

    stored = users.get_by_email("a@b.com")
    assert email_service.outbox == [("a@b.com", stored.reset_token)]
    assert stored.reset_token_expiry == clock.now + timedelta(hours=1)


def test_forgot_password_for_unknown_user_raises(auth, email_service):
    with pytest.raises(UserNotFound):
        auth.forgot_password("nobody@b.com")
    assert email_service.outbox == []


def test_forgot_password_clears_token_when_email_fails(auth, users, email_service):
    auth.register("A", "a@b.com", "pw")
    email_service.fail = True
    with pytest.raises(EmailDeliveryError):
        auth.forgot_password("a@b.com")
    stored = users.get_by_email("a@b.com")
    assert stored.reset_token is None
    assert stored.reset_token_expiry is None


def test_reset_password_hashes_new_password_and_consumes_token(auth, users, email_service):
    auth.register("A", "a@b.com", "old")
    auth.forgot_password("a@b.com")
    token = email_service.last_token

    auth.reset_password(token, "new")

    stored = users.get_by_email("a@b.com")
    assert stored.password_hash != "new"
    assert verify_password("new", stored.password_hash)
    assert stored.reset_token is None and stored.reset_token_expiry is None
    assert auth.login("a@b.com", "new")
    with pytest.raises(InvalidCredentials):
        auth.login("a@b.com", "old")
    with pytest.raises(InvalidOrExpiredToken):
        auth.reset_password(token, "again")


def test_reset_password_rejects_expired_token(auth, email_service, clock):
    auth.register("A", "a@b.com", "old")
    auth.forgot_password("a@b.com")
    clock.now += timedelta(hours=1)
    with pytest.raises(InvalidOrExpiredToken):
        auth.reset_password(email_service.last_token, "new")


def test_reset_password_rejects_unknown_token(auth):
    with pytest.raises(InvalidOrExpiredToken):
        auth.reset_password("not-a-token", "new")


class RacingCredentialRepository(CredentialRepository):
    """Holds every token lookup until two callers have passed it."""

    def __init__(self, db_path):
        super().__init__(db_path)
        self.barrier = threading.Barrier(2, timeout=5)

    def get_by_reset_token(self, token, now):
        user = super().get_by_reset_token(token, now)
        self.barrier.wait()
        return user


def test_concurrent_resets_with_one_token_change_password_once(db_path, settings, email_service, clock):
    users = RacingCredentialRepository(db_path)
    auth = AuthService(
        users=users, tokens=TokenService(settings), email_service=email_service, clock=clock
    )
    auth.register("A", "a@b.com", "old")
    auth.forgot_password("a@b.com")
    token = email_service.last_token
    results = []

    def reset(password):
        try:
            auth.reset_password(token, password)
            results.append(("ok", password))
        except InvalidOrExpiredToken:
            results.append(("rejected", password))

    threads = [threading.Thread(target=reset, args=(pw,)) for pw in ("first", "second")]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    winners = [pw for outcome, pw in results if outcome == "ok"]
    assert len(results) == 2
    assert len(winners) == 1
    assert auth.login("a@b.com", winners[0])


def test_email_lookups_ignore_case(auth, users, email_service):
    auth.register("Alice", "Alice@Example.COM", "pw")
    assert users.get_by_email("alice@example.com").email == "alice@example.com"
    assert auth.login("ALICE@example.com", "pw")
    auth.forgot_password(" Alice@Example.COM ")
    assert email_service.outbox[-1][0] == "alice@example.com"
