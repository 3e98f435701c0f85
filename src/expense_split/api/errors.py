"""Error taxonomy surfaced by the HTTP API."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

UNAUTHORIZED = "unauthorized"
INVALID_CREDENTIALS = "invalid_credentials"
INVALID_PARTICIPANTS_DATA = "invalid_participants_data"
SESSION_NOT_FOUND_OR_EXPIRED = "session_not_found_or_expired"
SESSION_NOT_FOUND = "session_not_found"
SESSION_NOT_FOUND_OR_FORBIDDEN = "session_not_found_or_forbidden"
FORBIDDEN = "forbidden"
UPDATE_FAILED = "update_failed"
EXTENSION_FAILED = "extension_failed"
INTERNAL_ERROR = "internal_error"


class ApiError(Exception):
    """Expected failure rendered as ``{"error": code}``."""

    def __init__(
        self,
        status_code: int,
        error: str,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.headers = headers


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers that keep error bodies to the fixed taxonomy."""

    @app.exception_handler(ApiError)
    async def handle_api_error(_request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR},
        )
