"""Web views for the registration flow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from .api import REGISTER_PATH
from .config import Settings
from .guards import HOME_PATH, LOGIN_PATH, REGISTER_VIEW_PATH, anonymous_only
from .validation import PASSWORD_MIN_LENGTH

logger = logging.getLogger("accounts.web")

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


def _template_environment() -> Jinja2Templates:
    return Jinja2Templates(directory=str(TEMPLATE_DIR))


def register_ui_routes(app: FastAPI, *, settings: Settings) -> None:
    """Expose the HTML views on the provided FastAPI application."""

    templates = _template_environment()
    cookie_name = settings.auth_cookie_name

    def credential_state(request: Request) -> Optional[str]:
        return request.cookies.get(cookie_name)

    @app.get(HOME_PATH, response_class=HTMLResponse, name="home")
    async def home(request: Request):
        return templates.TemplateResponse(
            request,
            "home.html",
            {"register_url": REGISTER_VIEW_PATH, "login_url": LOGIN_PATH},
        )

    @app.get(REGISTER_VIEW_PATH, response_class=HTMLResponse, name="show_register")
    async def register_form(
        request: Request,
        auth_token: Optional[str] = Depends(credential_state),
    ):
        target = anonymous_only(auth_token)
        if target is not None:
            logger.debug("Authenticated visitor redirected away from registration")
            return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)

        return templates.TemplateResponse(
            request,
            "register.html",
            {
                "api_url": REGISTER_PATH,
                "login_url": LOGIN_PATH,
                "password_min_length": PASSWORD_MIN_LENGTH,
                "redirect_delay_ms": int(settings.redirect_delay * 1000),
            },
        )

    @app.get(LOGIN_PATH, response_class=HTMLResponse, name="show_login")
    async def login_form(request: Request):
        return templates.TemplateResponse(
            request,
            "login.html",
            {"register_url": REGISTER_VIEW_PATH},
        )


__all__ = ["register_ui_routes"]
