"""
SQLite-backed credential store.

Each user row holds the bcrypt hash of the password and, while a
password reset is pending, the reset token together with its expiry.
The two reset columns are always written and cleared by the same
statement so that one is never set without the other.  Emails are
stored and looked up in the form returned by ``normalize_email``.
"""

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..core.db import get_connection
from ..core.errors import EmailAlreadyRegistered


@dataclass
class UserRecord:
    """A row of the ``users`` table."""

    id: Optional[int]
    name: str
    email: str
    password_hash: str
    reset_token: Optional[str] = None
    reset_token_expiry: Optional[datetime] = None


def _to_db_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


def _from_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_email(email: str) -> str:
    """Return the lookup form of an address: trimmed and lowercased."""
    return email.strip().lower()


def _row_to_user(row: sqlite3.Row) -> UserRecord:
    return UserRecord(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        reset_token=row["reset_token"],
        reset_token_expiry=_from_db_timestamp(row["reset_token_expiry"]),
    )


_USER_COLUMNS = "id, name, email, password_hash, reset_token, reset_token_expiry"


class CredentialRepository:
    """CRUD for user credentials in the ``users`` table."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def create(self, user: UserRecord) -> UserRecord:
        """Insert a user and return it with the generated id.

        Raises ``EmailAlreadyRegistered`` when the email is taken.
        """
        conn = get_connection(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO users (name, email, password_hash, reset_token, reset_token_expiry) "
                "VALUES (?, ?, ?, NULL, NULL)",
                (user.name, normalize_email(user.email), user.password_hash),
            )
            conn.commit()
            user.id = cursor.lastrowid
            user.email = normalize_email(user.email)
            user.reset_token = None
            user.reset_token_expiry = None
            return user
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise EmailAlreadyRegistered() from exc
        finally:
            conn.close()

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?", (normalize_email(email),)
            ).fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    def get_by_id(self, user_id: int) -> Optional[UserRecord]:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    def save_reset_token(self, user_id: int, token: str, expiry: datetime) -> bool:
        """Store a reset token and its expiry on the user row.

        Returns ``False`` if the user does not exist.
        """
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "UPDATE users SET reset_token = ?, reset_token_expiry = ? WHERE id = ?",
                (token, _to_db_timestamp(expiry), user_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def clear_reset_token(self, user_id: int) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                "UPDATE users SET reset_token = NULL, reset_token_expiry = NULL WHERE id = ?",
                (user_id,),
            )
            conn.commit()
        finally:
            conn.close()

    def get_by_reset_token(self, token: str, now: datetime) -> Optional[UserRecord]:
        """Return the user holding ``token`` if it expires strictly after ``now``.

        Expiry is compared on parsed datetimes rather than in SQL so the
        comparison does not depend on the textual timestamp format.
        """
        conn = get_connection(self.db_path)
        try:
            rows = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE reset_token = ?", (token,)
            ).fetchall()
        finally:
            conn.close()
        for row in rows:
            user = _row_to_user(row)
            if user.reset_token_expiry is not None and user.reset_token_expiry > now:
                return user
        return None

    def update_password(self, user_id: int, password_hash: str) -> bool:
        """Overwrite the password hash and clear any pending reset."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "UPDATE users SET password_hash = ?, reset_token = NULL, reset_token_expiry = NULL "
                "WHERE id = ?",
                (password_hash, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def consume_reset_token(self, token: str, password_hash: str, now: datetime) -> Optional[UserRecord]:
        """Set a new password for the holder of a live reset token.

        The UPDATE only matches while the row still carries ``token``,
        so of several concurrent callers at most one succeeds.  Returns
        the user whose password changed, or ``None``.
        """
        user = self.get_by_reset_token(token, now)
        if user is None:
            return None
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "UPDATE users SET password_hash = ?, reset_token = NULL, reset_token_expiry = NULL "
                "WHERE id = ? AND reset_token = ?",
                (password_hash, user.id, token),
            )
            conn.commit()
            if cursor.rowcount == 0:
                return None
        finally:
            conn.close()
        user.password_hash = password_hash
        user.reset_token = None
        user.reset_token_expiry = None
        return user
