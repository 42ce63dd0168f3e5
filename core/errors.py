"""
Application error type and the FastAPI handlers that render every failure
as ``{"success": false, "message", "code"?, "status"}``.
"""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from utils.logger import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Error carrying an HTTP status and an optional application code."""

    def __init__(self, message: str, status: int = 500, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "message": self.message}
        if self.code is not None:
            body["code"] = self.code
        body["status"] = self.status
        return body

    def __repr__(self):
        return f"<AppError(status={self.status}, code={self.code}, message='{self.message}')>"


UNAUTHORIZED = (1000, 401)
USER_NOT_FOUND = (1004, 401)


def unauthorized(message: str = "UNAUTHORIZED") -> AppError:
    code, status = UNAUTHORIZED
    return AppError(message, status=status, code=code)


def user_not_found() -> AppError:
    code, status = USER_NOT_FOUND
    return AppError("USER_NOT_FOUND", status=status, code=code)


def _error_response(error: AppError) -> JSONResponse:
    return JSONResponse(status_code=error.status, content=error.to_dict())


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.debug(f"{request.method} {request.url.path} -> {exc.status}: {exc.message}")
    return _error_response(exc)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Not Found - {request.url.path}"
    return _error_response(AppError(message, status=exc.status_code))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(AppError("Validation failed", status=422))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error_response(AppError("Internal Server Error", status=500))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to ``app``."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
