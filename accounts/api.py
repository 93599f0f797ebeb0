"""JSON API for account registration."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import InternalError, InvalidInput, MethodNotAllowed, RegistrationError
from .registration import RegistrationService

logger = logging.getLogger("accounts.api")

REGISTER_PATH = "/api/auth/register"

# Common methods reach the handler directly; anything else is rewritten by
# method_not_allowed_handler.
_ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

SUCCESS_MESSAGE = "Account created successfully"


async def _read_json(request: Request) -> Any:
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError as exc:
        raise InvalidInput("Request body must be valid JSON") from exc


def _error_response(error: RegistrationError) -> JSONResponse:
    headers: Dict[str, str] = {}
    if isinstance(error, MethodNotAllowed):
        headers["Allow"] = "POST"
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_payload(),
        headers=headers or None,
    )


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Give 405s on the registration path the same JSON body as the handler."""

    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and request.url.path == REGISTER_PATH:
        return _error_response(MethodNotAllowed())
    return await http_exception_handler(request, exc)


def create_router(service: RegistrationService) -> APIRouter:
    """Build the router exposing ``POST /api/auth/register``."""

    router = APIRouter()

    @router.api_route(REGISTER_PATH, methods=_ROUTED_METHODS, name="register_account")
    async def register_account(request: Request) -> JSONResponse:
        try:
            if request.method != "POST":
                raise MethodNotAllowed()
            payload = await _read_json(request)
            await service.register(payload)
        except RegistrationError as exc:
            if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
                logger.error("Registration failed: %s", exc)
            return _error_response(exc)
        except Exception:
            logger.exception("Unexpected error while registering an account")
            return _error_response(InternalError())

        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={"success": True, "message": SUCCESS_MESSAGE},
        )

    return router


__all__ = ["REGISTER_PATH", "SUCCESS_MESSAGE", "create_router", "method_not_allowed_handler"]
