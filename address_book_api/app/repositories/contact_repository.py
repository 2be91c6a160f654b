"""
Contact stores.

Two interchangeable implementations of ``ContactRepository`` exist:

* ``InMemoryContactRepository`` keeps contacts in a list owned by the
  repository object.  Ids come from a counter starting at 1.  A lock
  serialises every access so that concurrent requests never allocate
  the same id or observe a half-applied update.
* ``SqliteContactRepository`` stores contacts in the ``contacts`` table
  and lets SQLite generate the key.

``build_contact_repository`` picks one according to
``Settings.contact_store``.  Missing ids are reported with ``None`` or
``False``, never with an exception.
"""

import itertools
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.config import Settings
from ..core.db import get_connection
from ..schemas.contact import Contact, ContactCreate


class ContactRepository(ABC):
    """Interface shared by the contact stores."""

    @abstractmethod
    def get_all(self) -> List[Contact]:
        """Return a snapshot of every stored contact."""

    @abstractmethod
    def get_by_id(self, contact_id: int) -> Optional[Contact]:
        """Return the contact or ``None`` if it does not exist."""

    @abstractmethod
    def add(self, contact: ContactCreate) -> Contact:
        """Persist a new contact and return it with its assigned id."""

    @abstractmethod
    def update(self, contact_id: int, contact: ContactCreate) -> bool:
        """Overwrite every field of an existing contact."""

    @abstractmethod
    def delete(self, contact_id: int) -> bool:
        """Remove a contact; ``False`` if it was not present."""


class InMemoryContactRepository(ContactRepository):
    def __init__(self) -> None:
        self._contacts: List[Contact] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def get_all(self) -> List[Contact]:
        with self._lock:
            return [c.model_copy() for c in self._contacts]

    def get_by_id(self, contact_id: int) -> Optional[Contact]:
        with self._lock:
            for contact in self._contacts:
                if contact.id == contact_id:
                    return contact.model_copy()
        return None

    def add(self, contact: ContactCreate) -> Contact:
        with self._lock:
            stored = Contact(id=next(self._ids), **contact.model_dump())
            self._contacts.append(stored)
            return stored.model_copy()

    def update(self, contact_id: int, contact: ContactCreate) -> bool:
        with self._lock:
            for index, existing in enumerate(self._contacts):
                if existing.id == contact_id:
                    self._contacts[index] = Contact(id=contact_id, **contact.model_dump())
                    return True
        return False

    def delete(self, contact_id: int) -> bool:
        with self._lock:
            for index, existing in enumerate(self._contacts):
                if existing.id == contact_id:
                    del self._contacts[index]
                    return True
        return False


class SqliteContactRepository(ContactRepository):
    """Contact store backed by the ``contacts`` table.

    Row order of ``get_all`` is whatever SQLite returns; no ordering is
    promised.  Concurrent writers are serialised by SQLite's own
    locking.
    """

    _COLUMNS = "id, first_name, last_name, email, phone, address"

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def get_all(self) -> List[Contact]:
        conn = get_connection(self.db_path)
        try:
            rows = conn.execute(f"SELECT {self._COLUMNS} FROM contacts").fetchall()
            return [Contact(**dict(row)) for row in rows]
        finally:
            conn.close()

    def get_by_id(self, contact_id: int) -> Optional[Contact]:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                f"SELECT {self._COLUMNS} FROM contacts WHERE id = ?", (contact_id,)
            ).fetchone()
            return Contact(**dict(row)) if row else None
        finally:
            conn.close()

    def add(self, contact: ContactCreate) -> Contact:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "INSERT INTO contacts (first_name, last_name, email, phone, address) "
                "VALUES (?, ?, ?, ?, ?)",
                (contact.first_name, contact.last_name, contact.email, contact.phone, contact.address),
            )
            conn.commit()
            return Contact(id=cursor.lastrowid, **contact.model_dump())
        finally:
            conn.close()

    def update(self, contact_id: int, contact: ContactCreate) -> bool:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "UPDATE contacts SET first_name = ?, last_name = ?, email = ?, phone = ?, address = ? "
                "WHERE id = ?",
                (
                    contact.first_name,
                    contact.last_name,
                    contact.email,
                    contact.phone,
                    contact.address,
                    contact_id,
                ),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def delete(self, contact_id: int) -> bool:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("DELETE FROM contacts WHERE id = ?", (contact_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()


def build_contact_repository(settings: Settings) -> ContactRepository:
    """Return the contact store selected by ``settings.contact_store``."""
    if settings.contact_store == "sqlite":
        return SqliteContactRepository(settings.database_url)
    return InMemoryContactRepository()
