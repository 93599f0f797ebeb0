"""Error kinds surfaced by the registration endpoint."""
from __future__ import annotations

from typing import Optional

from fastapi import status


class RegistrationError(Exception):
    """Base class for failures that map onto a fixed JSON response.

    ``message`` is always safe to show to the client.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something Went Wrong Please Retry Later !"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"success": False, "message": self.message}


class MethodNotAllowed(RegistrationError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_message = "Method not allowed"


class InvalidInput(RegistrationError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request body"


class Conflict(RegistrationError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "User Already Exist"


class InternalError(RegistrationError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "Conflict",
    "InternalError",
    "InvalidInput",
    "MethodNotAllowed",
    "RegistrationError",
]
