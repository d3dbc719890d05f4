"""
Error taxonomy shared by services and API routes.

Every error carries a short machine-stable ``error`` code plus a human
``detail``. Routes never build error responses by hand; the handlers
registered in ``register_exception_handlers`` render them.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("errors")


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"
    default_detail = "Invalid request"


class ReferralCodeExpired(ValidationError):
    error = "referral_code_expired"
    default_detail = "Referral code has expired"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthorized"
    default_detail = "Could not validate credentials"


class MissingToken(Unauthorized):
    default_detail = "Missing bearer token"


class MalformedToken(Unauthorized):
    default_detail = "Malformed token"


class ExpiredToken(Unauthorized):
    default_detail = "Token expired"


class InvalidSignature(Unauthorized):
    default_detail = "Token signature invalid"


class InvalidCredentials(Unauthorized):
    error = "invalid_credentials"
    default_detail = "Invalid credentials"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"
    default_detail = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_detail = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "conflict"
    default_detail = "Resource already exists"


def _error_response(exc: AppError) -> JSONResponse:
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "detail": exc.detail},
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return _error_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return _error_response(ValidationError("; ".join(messages) or None))


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Store failure during %s %s", request.method, request.url.path)
    return _error_response(AppError("Store unavailable"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
