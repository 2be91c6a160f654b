import smtplib

import pytest

from address_book_api.app.core.config import Settings
from address_book_api.app.core.errors import EmailDeliveryError
from address_book_api.app.services import email_service as email_module
from address_book_api.app.services.email_service import (
    ConsoleEmailService,
    SmtpEmailService,
    build_email_service,
)


@pytest.fixture
def smtp_settings():
    return Settings(
        secret_key="x",
        email_backend="smtp",
        smtp_server="smtp.example.com",
        smtp_port=587,
        sender_email="noreply@example.com",
        sender_password="app-password",
    )


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port = host, port
        self.calls = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def send_message(self, message):
        self.sent.append(message)


def test_smtp_service_sends_reset_token(monkeypatch, smtp_settings):
    FakeSMTP.instances = []
    monkeypatch.setattr(email_module.smtplib, "SMTP", FakeSMTP)

    SmtpEmailService(smtp_settings).send_password_reset_email("a@b.com", "tok-123")

    smtp = FakeSMTP.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.example.com", 587)
    assert smtp.calls == ["starttls", ("login", "noreply@example.com", "app-password")]
    message = smtp.sent[0]
    assert message["To"] == "a@b.com"
    assert message["Subject"] == "Password Reset Request"
    assert "tok-123" in message.get_content()


def test_smtp_failure_becomes_email_delivery_error(monkeypatch, smtp_settings):
    class RefusingSMTP(FakeSMTP):
        def login(self, user, password):
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    monkeypatch.setattr(email_module.smtplib, "SMTP", RefusingSMTP)
    with pytest.raises(EmailDeliveryError):
        SmtpEmailService(smtp_settings).send_password_reset_email("a@b.com", "tok")


def test_connection_failure_becomes_email_delivery_error(monkeypatch, smtp_settings):
    def unreachable(*args, **kwargs):
        raise ConnectionRefusedError("no route")

    monkeypatch.setattr(email_module.smtplib, "SMTP", unreachable)
    with pytest.raises(EmailDeliveryError):
        SmtpEmailService(smtp_settings).send_password_reset_email("a@b.com", "tok")


def test_build_email_service_picks_backend(smtp_settings):
    assert isinstance(build_email_service(smtp_settings), SmtpEmailService)
    assert isinstance(build_email_service(Settings(secret_key="x", email_backend="console")), ConsoleEmailService)
