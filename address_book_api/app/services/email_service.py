"""
Outbound email for password recovery.

``SmtpEmailService`` talks to a real SMTP server using the settings in
``core.config``; ``ConsoleEmailService`` only logs the message and is
the default for local development.  Any delivery problem surfaces as
``EmailDeliveryError`` so that the caller can undo the reset token it
just stored.
"""

import logging
import smtplib
from email.message import EmailMessage

from ..core.config import Settings
from ..core.errors import EmailDeliveryError


logger = logging.getLogger(__name__)

RESET_SUBJECT = "Password Reset Request"


def build_reset_message(sender: str, recipient: str, token: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = RESET_SUBJECT
    message["From"] = sender
    message["To"] = recipient
    message.set_content(f"Use this token to reset your password: {token}")
    return message


class EmailService:
    """Interface for sending password reset emails."""

    def send_password_reset_email(self, email: str, token: str) -> None:
        raise NotImplementedError


class SmtpEmailService(EmailService):
    def __init__(self, settings: Settings, timeout: float = 10.0) -> None:
        self.server = settings.smtp_server
        self.port = settings.smtp_port
        self.sender_email = settings.sender_email
        self.sender_password = settings.sender_password
        self.use_tls = settings.smtp_use_tls
        self.timeout = timeout

    def send_password_reset_email(self, email: str, token: str) -> None:
        """Send the reset token to ``email``.

        The connection is upgraded with STARTTLS when ``smtp_use_tls``
        is set, then authenticated with the sender credentials.
        """
        message = build_reset_message(self.sender_email, email, token)
        try:
            with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                smtp.login(self.sender_email, self.sender_password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send password reset email to %s: %s", email, exc)
            raise EmailDeliveryError(f"Failed to send password reset email: {exc}") from exc
        logger.info("Password reset email sent to %s", email)


class ConsoleEmailService(EmailService):
    """Development backend that writes the email to the log."""

    def send_password_reset_email(self, email: str, token: str) -> None:
        logger.info("Password reset email for %s: token=%s", email, token)


def build_email_service(settings: Settings) -> EmailService:
    if settings.email_backend == "smtp":
        return SmtpEmailService(settings)
    return ConsoleEmailService()
