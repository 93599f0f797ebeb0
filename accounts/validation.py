"""Schema validation for registration payloads."""
from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from .errors import InvalidInput

PASSWORD_MIN_LENGTH = 8


class RegistrationRequest(BaseModel):
    """Fields accepted by ``POST /api/auth/register``.

    Declaration order matters: the first failing field (email, then password,
    then name) determines the message returned to the client.
    """

    model_config = ConfigDict(extra="ignore")

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    name: str = Field(..., min_length=1)

    @field_validator("email", "name", mode="before")
    @classmethod
    def _strip_whitespace(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def _reject_null_characters(cls, value: str) -> str:
        # bcrypt cannot hash NUL bytes
        if "\x00" in value:
            raise PydanticCustomError("string_null_character", "contains a null character")
        return value


def _describe_error(error: Mapping[str, Any]) -> str:
    field = ".".join(str(part) for part in error.get("loc", ())) or "value"
    kind = error.get("type")
    value = error.get("input")

    if kind == "missing":
        return f"{field} is required"
    if kind == "string_type":
        return f"{field} must be a string"
    if kind == "string_null_character":
        return f"{field} must not contain null characters"
    if value == "":
        return f"{field} is not allowed to be empty"
    if kind == "string_too_short":
        min_length = (error.get("ctx") or {}).get("min_length", 1)
        if min_length <= 1:
            return f"{field} is not allowed to be empty"
        return f"{field} length must be at least {min_length} characters long"
    if field == "email":
        return "email must be a valid email"
    return f"{field} is invalid"


def validate_registration(payload: Any) -> RegistrationRequest:
    """Validate a decoded JSON body.

    Raises :class:`InvalidInput` describing the first violated rule. Anything
    other than a JSON object is treated as an empty object.
    """

    data = payload if isinstance(payload, Mapping) else {}
    try:
        return RegistrationRequest.model_validate(dict(data))
    except ValidationError as exc:
        errors = exc.errors()
        message = _describe_error(errors[0]) if errors else "Invalid request body"
        raise InvalidInput(message) from exc


__all__ = ["PASSWORD_MIN_LENGTH", "RegistrationRequest", "validate_registration"]
