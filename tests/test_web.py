from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from accounts.config import Settings
from accounts.guards import anonymous_only
from accounts.service import create_app


def _app(tmp_path: Path, **overrides):
    settings = Settings(database_path=tmp_path / "accounts.sqlite3", password_rounds=4, **overrides)
    return create_app(settings=settings)


def test_anonymous_only_guard() -> None:
    assert anonymous_only(None) is None
    assert anonymous_only("") is None
    assert anonymous_only("abc123") == "/"


def test_register_page_renders_for_anonymous_visitors(tmp_path: Path) -> None:
    with TestClient(_app(tmp_path, redirect_delay=1.5)) as client:
        response = client.get("/auth/register")

    assert response.status_code == 200
    assert "Register your account" in response.text
    assert 'id="register-form"' in response.text
    assert '"/api/auth/register"' in response.text
    assert "1500" in response.text


def test_register_page_redirects_when_token_cookie_present(tmp_path: Path) -> None:
    with TestClient(_app(tmp_path)) as client:
        client.cookies.set("token", "existing-session")
        response = client.get("/auth/register", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_guard_uses_configured_cookie_name(tmp_path: Path) -> None:
    with TestClient(_app(tmp_path, auth_cookie_name="session")) as client:
        client.cookies.set("token", "ignored")
        allowed = client.get("/auth/register", follow_redirects=False)
        client.cookies.set("session", "present")
        redirected = client.get("/auth/register", follow_redirects=False)

    assert allowed.status_code == 200
    assert redirected.status_code == 303


@pytest.mark.parametrize("path, marker", [("/", "Welcome"), ("/auth/login", "Sign in")])
def test_static_views_render(tmp_path: Path, path: str, marker: str) -> None:
    with TestClient(_app(tmp_path)) as client:
        response = client.get(path)

    assert response.status_code == 200
    assert marker in response.text
