"""Mapping of ledger errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from shift_ledger.domain.errors import (
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    TransitionConflictError,
    UnauthorizedError,
    ValidationError,
)

_logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse({"error": code, "message": message}, status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers that turn ledger errors into JSON responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        _logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.code)
        return _error_response(status.HTTP_400_BAD_REQUEST, exc.code, exc.message)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, exc.code, exc.message)

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(
        request: Request, exc: UnauthorizedError
    ) -> JSONResponse:
        return _error_response(status.HTTP_401_UNAUTHORIZED, exc.code, exc.message)

    @app.exception_handler(ForbiddenError)
    async def forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
        return _error_response(status.HTTP_403_FORBIDDEN, exc.code, exc.message)

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        if isinstance(exc, TransitionConflictError):
            return _error_response(status.HTTP_409_CONFLICT, exc.code, exc.message)
        _logger.error(
            "Persistence failure on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return _error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            exc.code,
            PersistenceError.default_message,
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        _logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "UnexpectedError",
            "Internal server error.",
        )
