"""Observability middleware for FastAPI.

Provides:
- Request ID generation and propagation
- Request/response timing
- Logging of unhandled exceptions with traceback

Usage:
    from libs.common.middleware import add_observability_middleware

    app = FastAPI()
    add_observability_middleware(app)
"""
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from libs.common.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)

_QUIET_PATHS = frozenset({"/health"})


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Sets request context for log correlation and logs the request lifecycle.

    WebSocket traffic never reaches ``dispatch``; BaseHTTPMiddleware only
    wraps HTTP scopes.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_context(
            request_id=request.headers.get("X-Request-ID"),
            path=request.url.path,
            method=request.method,
        )
        quiet = request.url.path in _QUIET_PATHS
        start_time = time.perf_counter()

        if not quiet:
            logger.info("%s %s started", request.method, request.url.path)

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000
            if not quiet:
                log = logger.warning if response.status_code >= 400 else logger.info
                log(
                    "%s %s completed %d in %.2fms",
                    request.method,
                    request.url.path,
                    response.status_code,
                    duration_ms,
                    extra={"extra_fields": {"status_code": response.status_code}},
                )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "%s %s failed after %.2fms: %s",
                request.method,
                request.url.path,
                duration_ms,
                e,
            )
            raise

        finally:
            clear_request_context()


def add_observability_middleware(app: FastAPI) -> None:
    """
    Configure logging and install the request context middleware.
    """
    configure_logging()
    app.add_middleware(RequestContextMiddleware)
    logger.info("Observability middleware initialized")
