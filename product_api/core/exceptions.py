"""
Application Exception Handling

A single AppException tagged with an ErrorKind, plus the FastAPI handlers
that render every failure through one error formatter.
"""

from __future__ import annotations

import enum
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


# Module logger
logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """
    Classified error kinds.

    The value is the ``type`` reported to clients; each kind carries the
    HTTP status code it is served with.
    """

    NOT_FOUND = "NotFound"
    VALIDATION_ERROR = "ValidationError"
    INVALID_ARGUMENT = "InvalidArgument"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    INTERNAL = "Internal"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @classmethod
    def from_status(cls, status_code: int) -> "ErrorKind":
        """Best matching kind for a raw HTTP status code."""
        for kind, code in _STATUS_CODES.items():
            if code == status_code:
                return kind
        if 400 <= status_code < 500:
            return cls.INVALID_ARGUMENT
        return cls.INTERNAL


_STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.INTERNAL: 500,
}


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Usage:
        raise AppException(ErrorKind.NOT_FOUND, "Product not found")
        raise AppException(ErrorKind.VALIDATION_ERROR, "Invalid product", [{"field": "price", ...}])
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Optional[Any] = None,
        status_code: Optional[int] = None
    ):
        """
        Initialize application exception.

        Args:
            kind: Classified error kind
            message: Human-readable error message
            details: Structured error context (optional)
            status_code: Override for the kind's status code (optional)
        """
        self.kind = kind
        self.message = message
        self.details = details
        self.status_code = status_code or kind.status_code
        super().__init__(self.message)

    def to_dict(self, path: str) -> Dict[str, Any]:
        """Convert exception to the client-visible error body."""
        return {
            "error": {
                "type": self.kind.value,
                "message": self.message,
                "details": self.details if self.details else None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "path": path,
            }
        }

    def __repr__(self) -> str:
        return f"AppException(kind={self.kind.value}, message={self.message!r})"


# ============================================
# ERROR FORMATTING
# ============================================

def _request_context(request: Request) -> Dict[str, Any]:
    client = request.client.host if request.client else "unknown"
    return {
        "method": request.method,
        "path": request.url.path,
        "ip": client,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def format_error(request: Request, exc: AppException) -> JSONResponse:
    """Log an error with request context and render the structured response."""
    context = _request_context(request)

    if exc.status_code >= 500:
        logger.error(f"{exc.kind.value}: {exc.message} {context}")
    else:
        logger.warning(f"{exc.kind.value}: {exc.message} {context}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(request.url.path)
    )


def describe_validation_errors(errors: Sequence[Dict[str, Any]], skip_location: bool = False) -> List[Dict[str, Any]]:
    """
    Flatten pydantic error dicts into ``{field, message, type}`` entries.

    Args:
        errors: Output of ``ValidationError.errors()``
        skip_location: Drop the leading location segment ("body", "query")
    """
    problems = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if skip_location and loc:
            loc = loc[1:]
        problems.append({
            "field": ".".join(str(part) for part in loc) or None,
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "value_error"),
        })
    return problems


# ============================================
# FASTAPI EXCEPTION HANDLERS
# ============================================

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render AppException through the shared formatter."""
    return format_error(request, exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Convert FastAPI request validation failures.

    Problems confined to query/path parameters are InvalidArgument,
    anything touching the body is a ValidationError.
    """
    errors = exc.errors()
    details = describe_validation_errors(errors, skip_location=True)
    locations = {error.get("loc", ("body",))[0] for error in errors}

    if locations <= {"query", "path", "header"}:
        app_exc = invalid_argument("Invalid request parameters", details)
    else:
        app_exc = validation_failed(details, "Invalid request body")

    return format_error(request, app_exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Route-not-found fallback plus mapping of other framework HTTP errors."""
    if exc.status_code == 404:
        logger.warning(f"Route not found: {_request_context(request)}")
        return JSONResponse(
            status_code=404,
            content={
                "error": "Route not found",
                "path": request.url.path,
                "method": request.method,
            }
        )

    kind = ErrorKind.from_status(exc.status_code)
    app_exc = AppException(kind, str(exc.detail), status_code=exc.status_code)
    response = format_error(request, app_exc)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the traceback, never leak it."""
    logger.exception(f"Unhandled application error {_request_context(request)}", exc_info=exc)
    return format_error(request, internal_error())


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def product_not_found(product_id: Optional[str] = None) -> AppException:
    """Create product not found exception."""
    details = {"id": product_id} if product_id else None
    return AppException(ErrorKind.NOT_FOUND, "Product not found", details)


def validation_failed(problems: List[Dict[str, Any]], message: str = "Validation failed") -> AppException:
    """Create validation exception carrying per-field problems."""
    return AppException(ErrorKind.VALIDATION_ERROR, message, problems)


def invalid_argument(message: str, details: Optional[Any] = None) -> AppException:
    """Create invalid argument exception for malformed query input."""
    return AppException(ErrorKind.INVALID_ARGUMENT, message, details)


def missing_query_parameter(name: str) -> AppException:
    """Create exception for a required query parameter that is absent or blank."""
    return invalid_argument(
        f'Search query parameter "{name}" is required',
        {"parameter": name}
    )


def missing_api_key() -> AppException:
    """Create missing credential exception."""
    return AppException(
        ErrorKind.UNAUTHORIZED,
        "Authentication required. Please provide an API key in the x-api-key header"
    )


def invalid_api_key() -> AppException:
    """Create invalid credential exception."""
    return AppException(ErrorKind.FORBIDDEN, "Invalid API key")


def internal_error(message: str = "Internal server error") -> AppException:
    """Create internal server error exception."""
    return AppException(ErrorKind.INTERNAL, message)
