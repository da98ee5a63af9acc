"""
Typed API errors and their HTTP rendering.

Every error carries a stable dot-separated `code` for clients and the
HTTP status it maps to. `register_exception_handlers` renders them as
``{"success": false, "error": <message>, "code": <code>}``.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from logger import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    code = "internal.error"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_public_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message, "code": self.code}


class NotFound(ApiError):
    code = "resource.not_found"
    status_code = 404


class AuthenticationError(ApiError):
    code = "auth.unauthenticated"
    status_code = 401


class Unauthorized(ApiError):
    code = "auth.unauthorized"
    status_code = 403


class ValidationError(ApiError):
    code = "request.validation_error"
    status_code = 400


class InvalidFileType(ApiError):
    code = "upload.invalid_file_type"
    status_code = 400


class FileTooLarge(ApiError):
    code = "upload.file_too_large"
    status_code = 400


class GeocodeError(ApiError):
    code = "geocode.not_found"
    status_code = 400


class StorageError(ApiError):
    code = "upload.storage_error"
    status_code = 500


class PersistenceTimeout(ApiError):
    code = "database.timeout"
    status_code = 504


class AggregateComputeError(ApiError):
    """Raised inside aggregate maintenance; never reaches a client."""

    code = "aggregate.compute_error"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request failed", path=request.url.path, code=exc.code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_public_dict())

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        payload = {"success": False, "error": exc.detail, "code": f"http.{exc.status_code}"}
        return JSONResponse(status_code=exc.status_code, content=payload, headers=dict(exc.headers or {}))

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            messages.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
        payload = {"success": False, "error": ", ".join(messages), "code": ValidationError.code}
        return JSONResponse(status_code=400, content=payload)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled exception", path=request.url.path, error=str(exc))
        payload = {"success": False, "error": "Server Error", "code": "internal.unhandled"}
        return JSONResponse(status_code=500, content=payload)
