"""Mapping of authentication errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from authcore.services.errors import AuthError, InvalidTokenError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation_failure": status.HTTP_400_BAD_REQUEST,
    "duplicate_identity": status.HTTP_409_CONFLICT,
    "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
    "account_banned": status.HTTP_403_FORBIDDEN,
    "invalid_token": status.HTTP_401_UNAUTHORIZED,
    "principal_not_found": status.HTTP_401_UNAUTHORIZED,
    "invalid_or_expired_reset_token": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
}


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render an AuthError as {"detail", "code"} with the status of its kind."""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST)
    # Expired, malformed, forged and reused tokens look the same to clients
    message = exc.message
    if isinstance(exc, InvalidTokenError):
        message = InvalidTokenError.default_message
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}")
    else:
        logger.debug(f"{request.method} {request.url.path} rejected: {type(exc).__name__}")

    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": exc.kind},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain errors."""
    app.add_exception_handler(AuthError, auth_error_handler)
