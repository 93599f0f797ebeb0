from __future__ import annotations

from pathlib import Path

import pytest

from accounts.database import Database, DuplicateEmailError


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    db_path = tmp_path / "accounts.sqlite3"
    db = Database(db_path)
    db.initialize()
    return db


def test_create_and_find_user_by_email(database: Database) -> None:
    user = database.create_user(name="Ada", email="  Ada@Example.com ", password_hash="hashed-value")

    assert user.email == "ada@example.com"
    found = database.find_user_by_email("ADA@example.com")
    assert found is not None
    assert found.id == user.id
    assert found.name == "Ada"
    assert found.password_hash == "hashed-value"
    assert found.created_at.tzinfo is not None


def test_find_user_returns_none_when_missing(database: Database) -> None:
    assert database.find_user_by_email("nobody@example.com") is None


def test_unique_constraint_rejects_duplicate_email(database: Database) -> None:
    database.create_user(name="First", email="dup@example.com", password_hash="one")

    with pytest.raises(DuplicateEmailError):
        database.create_user(name="Second", email="DUP@example.com", password_hash="two")

    assert database.count_users_with_email("dup@example.com") == 1


def test_create_user_requires_password_hash(database: Database) -> None:
    with pytest.raises(ValueError):
        database.create_user(name="Empty", email="empty@example.com", password_hash="")


def test_initialize_is_idempotent(tmp_path: Path) -> None:
    db = Database(tmp_path / "nested" / "accounts.sqlite3")
    db.initialize()
    db.create_user(name="Kept", email="kept@example.com", password_hash="h")
    db.initialize()

    assert [user.email for user in db.list_users()] == ["kept@example.com"]
