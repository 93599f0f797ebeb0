"""Configuration management for the account registration service."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

DEFAULT_PASSWORD_ROUNDS = 12
DEFAULT_DATABASE_TIMEOUT = 5.0
DEFAULT_REDIRECT_DELAY = 2.0
DEFAULT_AUTH_COOKIE = "token"

_MIN_ROUNDS = 4
_MAX_ROUNDS = 31


def resolve_database_path(env_value: Optional[str]) -> Path:
    """Resolve the on-disk path for the accounts database."""

    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "accounts.sqlite3").resolve(strict=False)


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the optional YAML configuration file."""
    if env_value:
        candidate = Path(env_value).expanduser().resolve(strict=False)
    else:
        candidate = (Path(__file__).resolve().parent.parent / "config" / "accounts.yaml").resolve(strict=False)
    return candidate


def _parse_rounds(value: object) -> int:
    try:
        rounds = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Invalid password rounds value {value!r}") from exc
    if not _MIN_ROUNDS <= rounds <= _MAX_ROUNDS:
        raise ValueError(f"Password rounds must be between {_MIN_ROUNDS} and {_MAX_ROUNDS}")
    return rounds


def _parse_seconds(value: object, setting: str) -> float:
    try:
        seconds = float(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Invalid {setting} value {value!r}") from exc
    if seconds < 0:
        raise ValueError(f"{setting} must not be negative")
    return seconds


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the registration service."""

    database_path: Path
    password_rounds: int = DEFAULT_PASSWORD_ROUNDS
    database_timeout: float = DEFAULT_DATABASE_TIMEOUT
    redirect_delay: float = DEFAULT_REDIRECT_DELAY
    auth_cookie_name: str = DEFAULT_AUTH_COOKIE

    @staticmethod
    def from_dict(data: Mapping[str, object], base_path: Path | None = None) -> "Settings":
        """Create :class:`Settings` from raw dictionary data."""
        raw_path = data.get("database_path")
        if raw_path:
            candidate = Path(str(raw_path)).expanduser()
            if not candidate.is_absolute() and base_path is not None:
                candidate = base_path / candidate
            database_path = candidate.resolve(strict=False)
        else:
            database_path = resolve_database_path(None)

        cookie_name = str(data.get("auth_cookie_name") or DEFAULT_AUTH_COOKIE).strip()
        if not cookie_name:
            raise ValueError("Auth cookie name must not be empty")

        return Settings(
            database_path=database_path,
            password_rounds=_parse_rounds(data.get("password_rounds", DEFAULT_PASSWORD_ROUNDS)),
            database_timeout=_parse_seconds(
                data.get("database_timeout", DEFAULT_DATABASE_TIMEOUT), "database timeout"
            ),
            redirect_delay=_parse_seconds(
                data.get("redirect_delay", DEFAULT_REDIRECT_DELAY), "redirect delay"
            ),
            auth_cookie_name=cookie_name,
        )


def _apply_env_overrides(settings: Settings, environ: Mapping[str, str]) -> Settings:
    overrides: Dict[str, object] = {}

    db_path = environ.get("ACCOUNTS_DB_PATH")
    if db_path:
        overrides["database_path"] = resolve_database_path(db_path)

    rounds = environ.get("ACCOUNTS_PASSWORD_ROUNDS")
    if rounds:
        overrides["password_rounds"] = _parse_rounds(rounds)

    timeout = environ.get("ACCOUNTS_DB_TIMEOUT")
    if timeout:
        overrides["database_timeout"] = _parse_seconds(timeout, "database timeout")

    delay = environ.get("ACCOUNTS_REDIRECT_DELAY")
    if delay:
        overrides["redirect_delay"] = _parse_seconds(delay, "redirect delay")

    cookie = environ.get("ACCOUNTS_AUTH_COOKIE")
    if cookie and cookie.strip():
        overrides["auth_cookie_name"] = cookie.strip()

    return replace(settings, **overrides) if overrides else settings


def load_settings(
    config_path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from the YAML file (when present) and the environment.

    Environment variables take precedence over values from the file.
    """
    env = os.environ if environ is None else environ
    path = config_path or resolve_config_path(env.get("ACCOUNTS_CONFIG"))

    raw: Dict[str, object] = {}
    if path.is_file():
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        section = loaded.get("accounts", {}) if isinstance(loaded, dict) else {}
        if not isinstance(section, dict):
            raise ValueError("The 'accounts' configuration section must be a mapping")
        raw = section

    settings = Settings.from_dict(raw, base_path=path.parent)
    return _apply_env_overrides(settings, env)


__all__ = ["Settings", "load_settings", "resolve_config_path", "resolve_database_path"]
