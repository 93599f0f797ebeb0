"""Domain models for the account registration service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class User:
    """Represents a user account stored in the accounts database."""

    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime


__all__ = ["User"]
