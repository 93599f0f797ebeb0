"""SQLite-backed persistence for user accounts."""
from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_DATABASE_TIMEOUT
from .models import User


class DuplicateEmailError(ValueError):
    """Raised when the unique email constraint rejects an insert."""


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def _serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


class Database:
    """Simple wrapper around SQLite for persisting user accounts."""

    def __init__(self, path: Path, *, timeout: float = DEFAULT_DATABASE_TIMEOUT) -> None:
        _ensure_directory(path)
        self._path = path
        self._timeout = timeout

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, timeout=self._timeout, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> None:
        """Create the users table and its unique email index if missing."""

        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );

                CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email ON users(email);
                """
            )

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------
    def create_user(self, *, name: str, email: str, password_hash: str) -> User:
        """Insert a new account record.

        The password must already be hashed. Raises :class:`DuplicateEmailError`
        when another account owns the email address.
        """

        if not password_hash:
            raise ValueError("Password hash must not be empty")

        normalized_email = normalize_email(email)
        created_at = _current_timestamp()

        with self._connect() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO users (name, email, password_hash, created_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (name, normalized_email, password_hash, _serialize_datetime(created_at)),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateEmailError("A user with that email already exists") from exc

            user_id = cursor.lastrowid

        return User(
            id=user_id,
            name=name,
            email=normalized_email,
            password_hash=password_hash,
            created_at=created_at,
        )

    def find_user_by_email(self, email: str) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?",
                (normalize_email(email),),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def count_users_with_email(self, email: str) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS total FROM users WHERE email = ?",
                (normalize_email(email),),
            ).fetchone()
        return int(row["total"])

    def list_users(self) -> List[User]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM users ORDER BY id").fetchall()
        return [self._row_to_user(row) for row in rows]

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=_parse_datetime(row["created_at"]),
        )


__all__ = ["Database", "DuplicateEmailError", "normalize_email"]
