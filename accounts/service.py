"""Application factory for the registration service."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI

from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import create_router, method_not_allowed_handler
from .config import Settings, load_settings
from .database import Database
from .registration import RegistrationService
from .security import PasswordHasher
from .web import register_ui_routes

logger = logging.getLogger("accounts.service")


def _initialise_database(database: Database) -> Database:
    database.initialize()
    return database


def create_app(
    *,
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    hasher: Optional[PasswordHasher] = None,
    include_web: bool = True,
) -> FastAPI:
    """Instantiate the FastAPI application serving the API and the views."""

    app_settings = settings or load_settings()
    db = database or Database(app_settings.database_path, timeout=app_settings.database_timeout)
    _initialise_database(db)

    password_hasher = hasher or PasswordHasher(rounds=app_settings.password_rounds)
    if password_hasher.rounds < 10:
        logger.warning(
            "Password hashing uses %s bcrypt rounds. Only use a low cost factor for tests.",
            password_hasher.rounds,
        )

    registration = RegistrationService(db, password_hasher)

    app = FastAPI(
        title="Account Registration Service",
        version="0.1.0",
        description="Creates user accounts from the registration form.",
    )
    app.state.settings = app_settings
    app.state.database = db
    app.state.registration = registration

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)
    app.include_router(create_router(registration))

    if include_web:
        register_ui_routes(app, settings=app_settings)

    return app


def create_api_app(
    *,
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    hasher: Optional[PasswordHasher] = None,
) -> FastAPI:
    """Return an application exposing only the JSON API."""

    return create_app(settings=settings, database=database, hasher=hasher, include_web=False)


__all__ = ["create_api_app", "create_app"]
