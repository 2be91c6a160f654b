"""
Registration, login and password recovery.

A password reset moves a user from "no pending reset" to "pending
reset" when ``forgot_password`` stores a random token with a one hour
expiry, and back again when ``reset_password`` consumes the token.  An
expired token is never swept; it simply stops matching at reset time.

Email addresses are matched case-insensitively: the credential store
keeps them in ``normalize_email`` form, so ``Alice@Example.COM`` and
``alice@example.com`` name the same account.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ..core.errors import (
    EmailDeliveryError,
    InvalidCredentials,
    InvalidOrExpiredToken,
    UserNotFound,
)
from ..core.security import TokenService, hash_password, verify_password
from ..repositories.credential_repository import CredentialRepository, UserRecord
from .email_service import EmailService
from .notification_service import USER_REGISTERED, NotificationPublisher


REGISTER_SUCCESS_MESSAGE = "User registered successfully"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthService:
    """Authentication and password recovery on top of the credential store."""

    def __init__(
        self,
        users: CredentialRepository,
        tokens: TokenService,
        email_service: EmailService,
        publisher: Optional[NotificationPublisher] = None,
        reset_token_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.users = users
        self.tokens = tokens
        self.email_service = email_service
        self.publisher = publisher
        self.reset_token_ttl = reset_token_ttl
        self.clock = clock

    def register(self, name: str, email: str, password: str) -> str:
        """Create a user with a bcrypt-hashed password.

        Raises ``EmailAlreadyRegistered`` if the email is taken.
        """
        logger = logging.getLogger(__name__)
        user = self.users.create(
            UserRecord(id=None, name=name, email=email, password_hash=hash_password(password))
        )
        logger.info("Registered user %s (id=%s)", user.email, user.id)
        if self.publisher is not None:
            self.publisher.publish(
                USER_REGISTERED, {"id": user.id, "name": user.name, "email": user.email}
            )
        return REGISTER_SUCCESS_MESSAGE

    def login(self, email: str, password: str) -> str:
        """Return a signed access token or raise ``InvalidCredentials``."""
        user = self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logging.getLogger(__name__).info("Failed login for %s", email)
            raise InvalidCredentials()
        return self.tokens.create_access_token(
            {"sub": user.email, "email": user.email, "name": user.name}
        )

    def forgot_password(self, email: str) -> None:
        """Issue a reset token and email it to the user.

        If the email cannot be delivered the token is cleared again
        before ``EmailDeliveryError`` propagates, so no unusable reset
        stays pending.
        """
        logger = logging.getLogger(__name__)
        user = self.users.get_by_email(email)
        if user is None:
            raise UserNotFound()
        token = str(uuid.uuid4())
        self.users.save_reset_token(user.id, token, self.clock() + self.reset_token_ttl)
        try:
            self.email_service.send_password_reset_email(user.email, token)
        except EmailDeliveryError:
            self.users.clear_reset_token(user.id)
            raise
        logger.info("Issued password reset token for user %s", user.id)

    def reset_password(self, token: str, new_password: str) -> None:
        """Replace the password of the user holding a live reset token.

        The token is consumed by the same statement that stores the new
        hash, so a token that two requests race on changes the password
        once and the loser gets ``InvalidOrExpiredToken``.
        """
        user = self.users.consume_reset_token(token, hash_password(new_password), self.clock())
        if user is None:
            raise InvalidOrExpiredToken()
        logging.getLogger(__name__).info("Password reset for user %s", user.id)
