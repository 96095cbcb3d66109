"""Map service exceptions to HTTP errors and install app-wide exception handlers."""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from mediagate.services.user_data import InvalidDataKeyError
from mediagate.services.users import (
    InvalidCredentialsError,
    ProtectedUserError,
    UserConflictError,
    UserNotFoundError,
    UserServiceError,
    UserValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    UserValidationError: status.HTTP_400_BAD_REQUEST,
    ProtectedUserError: status.HTTP_400_BAD_REQUEST,
    InvalidDataKeyError: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    UserConflictError: status.HTTP_409_CONFLICT,
}


def to_http_exception(exc: UserServiceError | InvalidDataKeyError) -> HTTPException:
    """Build the HTTPException for a service error; its message is client-safe."""
    code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=exc.message)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Invalid request %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request"},
    )


async def _storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)
