"""End-to-end tests for ``POST /api/auth/register``."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from accounts.config import Settings
from accounts.database import Database
from accounts.models import User
from accounts.service import create_app

REGISTER = "/api/auth/register"
GENERIC_ERROR = "Something Went Wrong Please Retry Later !"

ADA = {"name": "Ada", "email": "ada@example.com", "password": "longenough1"}


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(database_path=tmp_path / "accounts.sqlite3", password_rounds=4)


@pytest.fixture()
def database(settings: Settings) -> Database:
    db = Database(settings.database_path)
    db.initialize()
    return db


@pytest.fixture()
def client(settings: Settings, database: Database):
    app = create_app(settings=settings, database=database)
    with TestClient(app) as test_client:
        yield test_client


def test_register_creates_account_with_hashed_password(client: TestClient, database: Database) -> None:
    response = client.post(REGISTER, json=ADA)

    assert response.status_code == 201
    assert response.json() == {"success": True, "message": "Account created successfully"}

    stored = database.find_user_by_email("ada@example.com")
    assert stored is not None
    assert stored.name == "Ada"
    assert stored.password_hash != ADA["password"]
    assert stored.password_hash.startswith("$2b$04$")


def test_email_is_stored_trimmed_and_lowercase(client: TestClient, database: Database) -> None:
    response = client.post(REGISTER, json={**ADA, "email": "  ADA@Example.com "})

    assert response.status_code == 201
    stored = database.find_user_by_email("ada@example.com")
    assert stored is not None
    assert stored.email == "ada@example.com"


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"email": "ada@example.com", "password": "longenough1"}, "name is required"),
        ({"name": "Ada", "password": "longenough1"}, "email is required"),
        ({"name": "Ada", "email": "ada@example.com"}, "password is required"),
        ({**ADA, "password": "1234567"}, "password length must be at least 8 characters long"),
        ({**ADA, "email": "ada-at-example.com"}, "email must be a valid email"),
    ],
)
def test_invalid_payload_is_rejected_without_creating_a_record(
    client: TestClient, database: Database, payload: dict, message: str
) -> None:
    response = client.post(REGISTER, json=payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": message}
    assert database.list_users() == []


def test_malformed_json_is_rejected(client: TestClient, database: Database) -> None:
    response = client.post(
        REGISTER,
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert database.list_users() == []


def test_password_with_null_character_is_rejected(client: TestClient, database: Database) -> None:
    response = client.post(REGISTER, json={**ADA, "password": "abcdefgh\x00"})

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "password must not contain null characters",
    }
    assert database.list_users() == []


def test_duplicate_email_conflicts(client: TestClient, database: Database) -> None:
    first = client.post(REGISTER, json=ADA)
    second = client.post(REGISTER, json={**ADA, "name": "Someone Else", "email": "Ada@Example.com"})

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json() == {"success": False, "message": "User Already Exist"}
    assert database.count_users_with_email("ada@example.com") == 1


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "TRACE", "PURGE"])
def test_non_post_methods_are_not_allowed(client: TestClient, method: str) -> None:
    response = client.request(method, REGISTER)

    assert response.status_code == 405
    assert response.json() == {"success": False, "message": "Method not allowed"}
    assert response.headers["allow"] == "POST"


class _StaleLookupDatabase(Database):
    """Simulates a concurrent request inserting between lookup and write."""

    def find_user_by_email(self, email: str) -> Optional[User]:
        return None


def test_unique_constraint_maps_to_conflict(settings: Settings) -> None:
    database = _StaleLookupDatabase(settings.database_path)
    app = create_app(settings=settings, database=database)

    with TestClient(app) as client:
        assert client.post(REGISTER, json=ADA).status_code == 201
        duplicate = client.post(REGISTER, json=ADA)

    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "User Already Exist"
    assert database.count_users_with_email(ADA["email"]) == 1


class _UnreachableDatabase(Database):
    def find_user_by_email(self, email: str) -> Optional[User]:
        raise sqlite3.OperationalError("unable to open database file /secret/path")


def test_persistence_failure_returns_generic_error(settings: Settings, caplog) -> None:
    database = _UnreachableDatabase(settings.database_path)
    app = create_app(settings=settings, database=database)

    with caplog.at_level(logging.ERROR, logger="accounts.api"):
        with TestClient(app) as client:
            response = client.post(REGISTER, json=ADA)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": GENERIC_ERROR}
    assert "secret" not in response.text
    assert "Traceback" not in response.text
    assert any("Unexpected error" in record.getMessage() for record in caplog.records)


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
