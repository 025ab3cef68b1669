# ============================================================================
# FILE: videotube/core/exceptions.py
# ============================================================================
"""API error taxonomy and the handlers that turn errors into envelopes"""

from typing import Any, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base API error carrying an HTTP status code"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None,
                 status_code: Optional[int] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidInputError(ApiError):
    """Malformed identifier or missing/invalid field"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class UnauthorizedError(ApiError):
    """Missing, invalid or expired credentials"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized request"


class ForbiddenError(ApiError):
    """Authenticated but not allowed to act on the resource"""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InternalError(ApiError):
    """Store or asset-service failure"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(status_code: int, message: str, errors: Optional[List[Any]] = None) -> dict:
    return {
        "statusCode": status_code,
        "success": False,
        "message": message,
        "errors": errors or [],
        "data": None,
    }


def _format_validation_errors(raw_errors) -> List[dict]:
    formatted = []
    for err in raw_errors:
        location = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        formatted.append({"field": ".".join(location), "message": err.get("msg", "")})
    return formatted


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.message, exc.errors),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = _format_validation_errors(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(status.HTTP_400_BAD_REQUEST, "Invalid request data", errors),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body(status.HTTP_409_CONFLICT, "Resource conflicts with an existing record"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Make every failure leave the API as an error envelope"""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
