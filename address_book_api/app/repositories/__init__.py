"""
Persistence layer.

Repositories own every SQL statement and the in-memory contact list.
Services depend on them through constructor arguments, so a test can
hand a service any repository that satisfies the same methods.
"""

from .contact_repository import (  # noqa: F401
    ContactRepository,
    InMemoryContactRepository,
    SqliteContactRepository,
    build_contact_repository,
)
from .credential_repository import CredentialRepository, UserRecord  # noqa: F401
