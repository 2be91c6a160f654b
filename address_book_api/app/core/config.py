"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for everything except the JWT secret,
which must be supplied via ``SECRET_KEY``.  ``Settings.validate`` is
called once when the application is created so that a misconfigured
deployment fails at startup instead of on the first request that needs
the missing value.
"""

import os
from dataclasses import dataclass, field
from typing import List

from .errors import ConfigurationError


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


CONTACT_STORES = ("memory", "sqlite")
EMAIL_BACKENDS = ("smtp", "console")


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Address Book API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))

    # JWT signing.  The secret has no default on purpose; see ``validate``.
    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", ""))
    algorithm: str = field(default_factory=lambda: os.getenv("ALGORITHM", "HS256"))
    jwt_issuer: str = field(default_factory=lambda: os.getenv("JWT_ISSUER", "address-book-api"))
    jwt_audience: str = field(default_factory=lambda: os.getenv("JWT_AUDIENCE", "address-book-clients"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    )
    reset_token_expire_minutes: int = field(
        default_factory=lambda: int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "60"))
    )

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by ``core.db``.
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "address_book.db"))

    # Which contact store backs the CRUD endpoints: ``memory`` keeps
    # contacts in a process-local list, ``sqlite`` uses the contacts table.
    contact_store: str = field(default_factory=lambda: os.getenv("CONTACT_STORE", "memory").lower())

    redis_url: str = field(default_factory=lambda: os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    cache_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "600")))
    cache_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("CACHE_TIMEOUT_SECONDS", "0.5"))
    )

    notifications_enabled: bool = field(default_factory=lambda: _env_bool("NOTIFICATIONS_ENABLED", "false"))
    # Comma-separated queue names that get a background listener.
    notification_queues: str = field(
        default_factory=lambda: os.getenv("NOTIFICATION_QUEUES", "user_registered,contact_added")
    )

    email_backend: str = field(default_factory=lambda: os.getenv("EMAIL_BACKEND", "console").lower())
    smtp_server: str = field(default_factory=lambda: os.getenv("SMTP_SERVER", ""))
    smtp_port: int = field(default_factory=lambda: int(os.getenv("SMTP_PORT", "587")))
    sender_email: str = field(default_factory=lambda: os.getenv("SENDER_EMAIL", ""))
    sender_password: str = field(default_factory=lambda: os.getenv("SENDER_PASSWORD", ""))
    smtp_use_tls: bool = field(default_factory=lambda: _env_bool("SMTP_USE_TLS", "true"))

    @property
    def queue_names(self) -> List[str]:
        return [name.strip() for name in self.notification_queues.split(",") if name.strip()]

    def validate(self) -> "Settings":
        """Check required values and return ``self``.

        All problems are collected and reported together in a single
        ``ConfigurationError`` so that an operator can fix the whole
        environment in one pass.
        """
        problems: List[str] = []
        if not self.secret_key:
            problems.append("SECRET_KEY is missing")
        if self.contact_store not in CONTACT_STORES:
            problems.append(
                f"CONTACT_STORE must be one of {', '.join(CONTACT_STORES)} (got {self.contact_store!r})"
            )
        if self.email_backend not in EMAIL_BACKENDS:
            problems.append(
                f"EMAIL_BACKEND must be one of {', '.join(EMAIL_BACKENDS)} (got {self.email_backend!r})"
            )
        if self.email_backend == "smtp":
            for name, value in (
                ("SMTP_SERVER", self.smtp_server),
                ("SENDER_EMAIL", self.sender_email),
                ("SENDER_PASSWORD", self.sender_password),
            ):
                if not value:
                    problems.append(f"{name} is missing")
        if self.access_token_expire_minutes <= 0:
            problems.append("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        if self.cache_ttl_seconds <= 0:
            problems.append("CACHE_TTL_SECONDS must be positive")
        if problems:
            raise ConfigurationError("Invalid configuration: " + "; ".join(problems))
        return self


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
