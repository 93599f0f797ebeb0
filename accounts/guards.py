"""Route names and pre-render guards shared by the views and the form client."""

from __future__ import annotations

from typing import Optional

HOME_PATH = "/"
LOGIN_PATH = "/auth/login"
REGISTER_VIEW_PATH = "/auth/register"


def anonymous_only(auth_token: Optional[str]) -> Optional[str]:
    """Return where an anonymous-only view should send a signed-in visitor.

    ``auth_token`` is the credential presented with the current request;
    ``None`` means the view may render.
    """

    if auth_token:
        return HOME_PATH
    return None


__all__ = ["HOME_PATH", "LOGIN_PATH", "REGISTER_VIEW_PATH", "anonymous_only"]
