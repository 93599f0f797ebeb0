"""Client-side registration form.

:class:`RegistrationForm` models the browser form served at
``/auth/register``: editable field state, inline per-field errors, toast
notifications and the delayed hand-off to the login view. Requests go through
an ``httpx.Client`` so the same component runs against a live service or an
in-process ``TestClient``.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import httpx

from .api import REGISTER_PATH
from .config import DEFAULT_REDIRECT_DELAY
from .guards import LOGIN_PATH, anonymous_only
from .validation import PASSWORD_MIN_LENGTH

logger = logging.getLogger("accounts.client")

FIELDS = ("name", "email", "password")

NETWORK_ERROR_MESSAGE = "Network error. Please try again."


class NetworkError(RuntimeError):
    """Raised when the registration request does not produce a JSON reply."""


class FormState(str, enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"
    REDIRECTING = "redirecting"


@dataclass(frozen=True)
class Toast:
    """Transient notification shown to the visitor."""

    kind: str
    message: str


class RegistrationClient:
    """POST registration payloads and decode the JSON reply."""

    def __init__(self, http: httpx.Client, *, path: str = REGISTER_PATH) -> None:
        self._http = http
        self._path = path

    def register(self, form_data: Dict[str, str]) -> Dict[str, object]:
        try:
            response = self._http.post(self._path, json=form_data)
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc)) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise NetworkError("Registration endpoint returned a non-JSON response") from exc

        if not isinstance(payload, dict):
            raise NetworkError("Registration endpoint returned an unexpected payload")
        return payload


def register_me(client: RegistrationClient, form_data: Dict[str, str]) -> Dict[str, object]:
    """Submit the form, folding transport failures into a failed result."""

    try:
        return client.register(form_data)
    except NetworkError as exc:
        logger.warning("Registration request failed: %s", exc)
        return {"success": False, "message": NETWORK_ERROR_MESSAGE}


def _empty_fields() -> Dict[str, str]:
    return {field: "" for field in FIELDS}


class RegistrationForm:
    """State machine behind the registration view.

    Idle -> Validating -> Invalid -> Idle when local checks fail, otherwise
    Submitting -> Success -> Redirecting, or Submitting -> Failure -> Idle.
    """

    def __init__(
        self,
        client: RegistrationClient,
        *,
        navigate: Callable[[str], None],
        sleep: Callable[[float], None] = time.sleep,
        redirect_delay: float = DEFAULT_REDIRECT_DELAY,
        login_path: str = LOGIN_PATH,
    ) -> None:
        self._client = client
        self._navigate = navigate
        self._sleep = sleep
        self._redirect_delay = redirect_delay
        self._login_path = login_path

        self.form_data: Dict[str, str] = _empty_fields()
        self.errors: Dict[str, str] = _empty_fields()
        self.notifications: List[Toast] = []
        self.state = FormState.IDLE
        self.history: List[FormState] = [FormState.IDLE]

    def mount(self, auth_token: Optional[str]) -> bool:
        """Apply the anonymous-only guard; return ``True`` if the visitor was sent away."""

        target = anonymous_only(auth_token)
        if target is None:
            return False
        self._navigate(target)
        return True

    def update(self, field: str, value: str) -> None:
        if field not in self.form_data:
            raise KeyError(f"Unknown form field '{field}'")
        self.form_data[field] = value

    def fill(self, **values: str) -> None:
        for field, value in values.items():
            self.update(field, value)

    @property
    def has_errors(self) -> bool:
        return any(self.errors.values())

    def _transition(self, state: FormState) -> None:
        self.state = state
        self.history.append(state)

    def _validate(self) -> bool:
        if not self.form_data["name"]:
            self.errors["name"] = "Name Field is required"
        if not self.form_data["email"]:
            self.errors["email"] = "Email Field is required"

        password = self.form_data["password"]
        if not password:
            self.errors["password"] = "Password Field is required"
        elif len(password) < PASSWORD_MIN_LENGTH:
            self.errors["password"] = f"Password must be at least {PASSWORD_MIN_LENGTH} characters"

        return not self.has_errors

    def submit(self) -> FormState:
        self.errors = _empty_fields()
        self._transition(FormState.VALIDATING)

        if not self._validate():
            self._transition(FormState.INVALID)
            self._transition(FormState.IDLE)
            return self.state

        self._transition(FormState.SUBMITTING)
        data = register_me(self._client, dict(self.form_data))
        message = str(data.get("message") or "")

        if data.get("success"):
            self._transition(FormState.SUCCESS)
            self.notifications.append(Toast(kind="success", message=message))
            self._sleep(self._redirect_delay)
            self._transition(FormState.REDIRECTING)
            self._navigate(self._login_path)
            return self.state

        self._transition(FormState.FAILURE)
        self.notifications.append(Toast(kind="error", message=message))
        self._transition(FormState.IDLE)
        return self.state


__all__ = [
    "FormState",
    "NETWORK_ERROR_MESSAGE",
    "NetworkError",
    "RegistrationClient",
    "RegistrationForm",
    "Toast",
    "register_me",
]
