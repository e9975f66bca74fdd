"""
SocialSync API Response Utilities
One JSON error envelope for every failure the API reports:

    {"ok": false, "error": ..., "error_code": ..., "details": ..., "timestamp": ...}
"""
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import ConflictError, SocialSyncError, UnavailableError, ValidationError
from .logging_config import api_logger


def error_body(message: str, error_code: str, details: Optional[Dict] = None) -> Dict:
    return {
        "ok": False,
        "error": message,
        "error_code": error_code,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def error_response(status_code: int, message: str, error_code: str, details: Optional[Dict] = None, headers=None):
    return JSONResponse(
        status_code=status_code,
        content=error_body(message, error_code, details),
        headers=headers,
    )


# ============================================================
# ROUTE-LEVEL ERRORS
# ============================================================

class ApiException(HTTPException):
    """HTTP error raised from a route, carrying a stable error code."""

    def __init__(self, status_code: int, message: str, error_code: Optional[str] = None, details: Optional[Dict] = None):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code or f"HTTP_{status_code}"
        self.details = details


def bad_request(message: str, details: Optional[Dict] = None):
    raise ApiException(400, message, "BAD_REQUEST", details)


def not_found(resource: str = "Resource", key=None):
    message = f"{resource} not found" if key is None else f"{resource} '{key}' not found"
    raise ApiException(404, message, "NOT_FOUND")


# ============================================================
# EXCEPTION HANDLERS
# ============================================================

# Domain error -> (status, error code); first match wins
DOMAIN_ERRORS = (
    (ValidationError, 400, "VALIDATION_ERROR"),
    (ConflictError, 409, "CONFLICT"),
    (UnavailableError, 503, "UNAVAILABLE"),
)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error_code = getattr(exc, "error_code", f"HTTP_{exc.status_code}")
    api_logger.warning(
        f"HTTP {exc.status_code}: {exc.detail}",
        status_code=exc.status_code,
        error_code=error_code,
        path=request.url.path,
    )
    return error_response(
        exc.status_code,
        str(exc.detail),
        error_code,
        getattr(exc, "details", None),
        headers=getattr(exc, "headers", None),
    )


async def domain_exception_handler(request: Request, exc: SocialSyncError) -> JSONResponse:
    for error_type, status_code, error_code in DOMAIN_ERRORS:
        if isinstance(exc, error_type):
            break
    else:
        status_code, error_code = 500, "INTERNAL_ERROR"

    details = {"errors": exc.errors} if isinstance(exc, ValidationError) else None
    api_logger.warning(
        f"{type(exc).__name__}: {exc}",
        status_code=status_code,
        path=request.url.path,
        fields=exc.fields if isinstance(exc, ValidationError) else None,
    )
    return error_response(status_code, str(exc), error_code, details)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and parameters are reported like domain validation errors."""
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body") or "body",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    api_logger.warning("Invalid input", path=request.url.path, fields=[e["field"] for e in errors])
    return error_response(400, "Invalid input", "VALIDATION_ERROR", {"errors": errors})


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    api_logger.error(f"Unexpected error: {exc}", error=exc, path=request.url.path)
    return error_response(500, "An unexpected error occurred", "INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SocialSyncError, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)
