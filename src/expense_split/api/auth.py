"""Cookie login for session owners."""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from typing import TYPE_CHECKING

from fastapi import APIRouter, Header, Request, Response, status

from expense_split.api.errors import INVALID_CREDENTIALS, UNAUTHORIZED, ApiError
from expense_split.api.models import LoginRequest

if TYPE_CHECKING:
    from expense_split.config import Settings
    from expense_split.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

AUTH_COOKIE = "auth"
LOGIN_PAGE = "/login.html"


def sign_username(username: str, secret: str) -> str:
    """Return the cookie value proving ``username`` logged in."""
    signature = hmac.new(
        secret.encode(), username.encode(), hashlib.sha256
    ).hexdigest()
    return f"{username}.{signature}"


def verify_auth_cookie(value: str | None, secret: str) -> str | None:
    """Return the username from a signed cookie, or None if it is invalid."""
    if not value:
        return None
    username, separator, signature = value.rpartition(".")
    if not separator or not username:
        return None
    expected = sign_username(username, secret).rpartition(".")[2]
    if not secrets.compare_digest(signature.encode(), expected.encode()):
        return None
    return username


def _settings(request: Request) -> Settings:
    container: AppContainer = request.app.state.container
    return container.settings


def require_owner(
    request: Request,
    x_username: str | None = Header(default=None),
) -> str:
    """Resolve the acting owner or reject the request as unauthenticated."""
    settings = _settings(request)
    username = verify_auth_cookie(
        request.cookies.get(AUTH_COOKIE), settings.session_secret
    )
    if username is None:
        if "text/html" in request.headers.get("accept", ""):
            raise ApiError(
                status.HTTP_302_FOUND, UNAUTHORIZED, headers={"Location": LOGIN_PAGE}
            )
        raise ApiError(status.HTTP_401_UNAUTHORIZED, UNAUTHORIZED)
    return x_username or username


@router.post("/login", status_code=status.HTTP_204_NO_CONTENT)
def login(payload: LoginRequest, request: Request, response: Response) -> None:
    """Check credentials and set the signed auth cookie."""
    settings = _settings(request)
    valid_user = secrets.compare_digest(
        payload.username.encode(), settings.login_username.encode()
    )
    valid_password = secrets.compare_digest(
        payload.password.encode(), settings.login_password.encode()
    )
    if not (valid_user and valid_password):
        logger.warning("Failed login attempt for %s", payload.username)
        raise ApiError(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS)
    response.set_cookie(
        AUTH_COOKIE,
        sign_username(payload.username, settings.session_secret),
        httponly=True,
        samesite="lax",
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response) -> None:
    """Clear the auth cookie."""
    response.delete_cookie(AUTH_COOKIE)
