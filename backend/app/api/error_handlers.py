"""FastAPI exception handlers rendering every failure as {error, message, detail}."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import ServiceError
from app.services.auth import AuthError

logger = logging.getLogger("api.errors")

DEFAULT_ERRORS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("validation_error", "Invalid request payload"),
    status.HTTP_401_UNAUTHORIZED: ("unauthorized", "Authorization required"),
    status.HTTP_404_NOT_FOUND: ("not_found", "Resource not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("method_not_allowed", "method not allowed"),
    status.HTTP_409_CONFLICT: ("conflict", "Resource conflict"),
    status.HTTP_500_INTERNAL_SERVER_ERROR: ("internal_error", "Internal server error"),
}


def error_response(
    status_code: int, error: str, message: str, detail: Optional[Dict[str, Any]] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "detail": detail},
    )


def _normalize_error(status_code: int, detail: Any) -> Tuple[str, str, Optional[Dict[str, Any]]]:
    default_error, default_message = DEFAULT_ERRORS.get(
        status_code, DEFAULT_ERRORS[status.HTTP_500_INTERNAL_SERVER_ERROR]
    )
    if isinstance(detail, dict):
        return (
            detail.get("error", default_error),
            detail.get("message", default_message),
            detail.get("detail"),
        )
    if isinstance(detail, str) and detail:
        return default_error, detail, None
    return default_error, default_message, None


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        # storage details were already logged where they happened
        logger.warning("%s on %s: %s", exc.error, request.url.path, exc.message)
    return error_response(exc.status_code, exc.error, exc.message, exc.detail)


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    return error_response(exc.status_code, exc.error, exc.message, exc.detail)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "validation_error",
        "Invalid request payload",
        {"errors": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error, message, detail = _normalize_error(exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error, "message": message, "detail": detail},
        headers=getattr(exc, "headers", None),
    )


async def internal_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    error, message = DEFAULT_ERRORS[status.HTTP_500_INTERNAL_SERVER_ERROR]
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error, message)


def register_error_handlers(app: FastAPI) -> None:
    """Attach shared exception handlers to the FastAPI application."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, internal_exception_handler)


__all__ = ["register_error_handlers", "error_response"]
