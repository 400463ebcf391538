"""Domain error taxonomy and its mapping onto HTTP responses.

Services raise these instead of ``HTTPException`` so the same code paths can
be driven from tests, workers and routers alike. ``register_exception_handlers``
turns them into stable ``{"detail", "kind"}`` bodies at the boundary.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from libs.common.logging import get_logger

logger = get_logger(__name__)


class DomainError(Exception):
    """Base class for expected, user-visible failures."""

    kind = "domain_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """A referenced vendor, store, product or delivery does not exist."""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class UnavailableError(DomainError):
    """No active store can fulfil the request."""

    kind = "unavailable"
    status_code = status.HTTP_409_CONFLICT


class InvalidArgumentError(DomainError):
    kind = "invalid_argument"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info("%s on %s: %s", exc.kind, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors()), "kind": InvalidArgumentError.kind},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Traceback is logged by RequestContextMiddleware; keep internals out of the body.
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error", "kind": "internal"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
