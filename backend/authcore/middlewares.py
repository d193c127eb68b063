"""HTTP middlewares."""

import logging
from time import perf_counter

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


async def request_logging_middleware(request: Request, call_next):
    """Log method, path, status and duration of each request."""
    started_at = perf_counter()
    response = await call_next(request)
    elapsed_ms = round((perf_counter() - started_at) * 1000, 2)
    response.headers["X-Process-Time-Ms"] = str(elapsed_ms)

    message = (
        f"[{request.method}] {request.url.path} - "
        f"Status: {response.status_code} - Duration: {elapsed_ms}ms"
    )
    if response.status_code >= 400:
        logger.warning(message)
    else:
        logger.debug(message)
    return response


def register_middlewares(app: FastAPI) -> None:
    app.middleware("http")(request_logging_middleware)
