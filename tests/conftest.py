"""Shared fixtures: isolated settings, fake Redis, recording email sender."""

import os
from dataclasses import replace

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-address-book")

import fakeredis
import pytest
from fastapi.testclient import TestClient

from address_book_api.app.core.config import Settings
from address_book_api.app.core.db import init_db
from address_book_api.app.core.errors import EmailDeliveryError
from address_book_api.app.main import create_app
from address_book_api.app.services.email_service import EmailService


class RecordingEmailService(EmailService):
    """Keeps sent reset emails in ``outbox`` instead of delivering them."""

    def __init__(self):
        self.outbox = []
        self.fail = False

    def send_password_reset_email(self, email, token):
        if self.fail:
            raise EmailDeliveryError("SMTP server unavailable")
        self.outbox.append((email, token))

    @property
    def last_token(self):
        return self.outbox[-1][1]


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "address_book_test.db")
    init_db(path)
    return path


@pytest.fixture
def settings(db_path):
    return Settings(
        secret_key="test-secret-key-for-the-address-book",
        database_url=db_path,
        contact_store="memory",
        email_backend="console",
        notifications_enabled=False,
    )


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def email_service():
    return RecordingEmailService()


@pytest.fixture
def app(settings, redis_client, email_service):
    return create_app(settings, redis_client=redis_client, email_service=email_service)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def notifying_client(settings, redis_client, email_service):
    """Client for an app that publishes events to the queues.

    Used without the context manager, so startup does not run and no
    listener drains the queues while a test inspects them.
    """
    app = create_app(
        replace(settings, notifications_enabled=True),
        redis_client=redis_client,
        email_service=email_service,
    )
    return TestClient(app)


@pytest.fixture
def sample_contact():
    return {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john.doe@example.com",
        "phone": "1234567890",
        "address": "New York",
    }
