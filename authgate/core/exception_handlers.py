import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authgate.core.config import settings
from authgate.core.exceptions import AuthGateError, InternalError
from authgate.schemas.auth import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, code: str, headers: dict[str, str] | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def authgate_exception_handler(request: Request, exc: AuthGateError):
    return _error_response(exc.status_code, exc.message, exc.code, exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Invalid request body on %s %s: %s", request.method, request.url.path, exc.errors())
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body", "INVALID_REQUEST")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = InternalError()
    if settings.is_development:
        error = InternalError(f"{error.message}: {exc}")
    return _error_response(error.status_code, error.message, error.code)


def add_exception_handlers(app: FastAPI):
    app.add_exception_handler(AuthGateError, authgate_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
