"""Account creation workflow shared by the HTTP endpoint and the CLI."""
from __future__ import annotations

import logging
from typing import Any

import anyio

from .database import Database, DuplicateEmailError
from .errors import Conflict
from .models import User
from .security import PasswordHasher
from .validation import RegistrationRequest, validate_registration

logger = logging.getLogger("accounts.registration")


class RegistrationService:
    """Validate, de-duplicate, hash and persist new accounts.

    The lookup before insert is only a fast path. Two concurrent submissions
    for one address can both pass it; the unique index on ``users.email``
    rejects the second insert, which is reported as the same :class:`Conflict`.
    """

    def __init__(self, database: Database, hasher: PasswordHasher) -> None:
        self._database = database
        self._hasher = hasher

    @property
    def database(self) -> Database:
        return self._database

    async def register(self, payload: Any) -> User:
        request = validate_registration(payload)
        return await self.create_account(request)

    async def create_account(self, request: RegistrationRequest) -> User:
        existing = await anyio.to_thread.run_sync(self._database.find_user_by_email, request.email)
        if existing is not None:
            logger.info("Rejected registration for existing account %s", existing.id)
            raise Conflict()

        password_hash = await anyio.to_thread.run_sync(self._hasher.hash, request.password)

        try:
            user = await anyio.to_thread.run_sync(self._create, request, password_hash)
        except DuplicateEmailError as exc:
            logger.info("Unique email constraint rejected a concurrent registration")
            raise Conflict() from exc

        logger.info("Created account %s", user.id)
        return user

    def register_sync(self, payload: Any) -> User:
        """Blocking variant for command-line use."""

        return anyio.run(self.register, payload)

    def _create(self, request: RegistrationRequest, password_hash: str) -> User:
        return self._database.create_user(
            name=request.name,
            email=request.email,
            password_hash=password_hash,
        )


__all__ = ["RegistrationService"]
