"""Translate domain exceptions into HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from babui.exceptions import (
    AuthenticationError,
    BabuiError,
    BackendError,
    DuplicateRegistrationError,
    ExternalServiceError,
    InvalidCredentialsError,
    ListingValidationError,
    NotAuthenticatedError,
    NotFoundError,
    RouteNotFoundError,
)

logger = structlog.get_logger()

# Most specific first
STATUS_BY_ERROR: list[tuple[type[BabuiError], int]] = [
    (InvalidCredentialsError, 401),
    (NotAuthenticatedError, 401),
    (DuplicateRegistrationError, 409),
    (AuthenticationError, 400),
    (ListingValidationError, 422),
    (NotFoundError, 404),
    (RouteNotFoundError, 404),
    (ExternalServiceError, 502),
    (BackendError, 502),
]


def status_for(error: BabuiError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


async def handle_babui_error(request: Request, exc: BabuiError) -> JSONResponse:
    status_code = status_for(exc)
    body: dict = {"detail": str(exc)}
    if isinstance(exc, ListingValidationError):
        body["errors"] = [{"field": e.field, "message": e.message} for e in exc.errors]

    if status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
    else:
        logger.info("Request rejected", path=request.url.path, status=status_code, error=str(exc))
    return JSONResponse(status_code=status_code, content=body)


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BabuiError, handle_babui_error)
    app.add_exception_handler(ValueError, handle_value_error)
