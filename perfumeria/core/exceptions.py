"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Invalid credentials", "INVALID_CREDENTIALS", 401)
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404, {"codigo": "X1"})

    Error Codes:
        Authentication:
            - UNAUTHORIZED (401)
            - INVALID_CREDENTIALS (401)
            - TOKEN_EXPIRED (403)
            - TOKEN_INVALID (403)
            - ACCOUNT_DISABLED (403)

        User:
            - USERNAME_EXISTS (409)

        Product:
            - PRODUCT_NOT_FOUND (404)
            - DUPLICATE_KEY (409)
            - INVALID_IDENTIFIER (400)

        General:
            - VALIDATION_ERROR (400)
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic error dicts into ``{"field", "message"}`` pairs.

    The ``body`` segment FastAPI prepends to request body locations is dropped.
    """
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        formatted.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return formatted


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException to consistent JSON error response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI request validation failures as 400 VALIDATION_ERROR."""
    error = validation_failed(
        "Request validation failed",
        {"errors": format_validation_errors(exc.errors())}
    )
    logger.warning(f"{request.method} {request.url.path}: {error.details['errors']}")
    return await app_exception_handler(request, error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler turning unexpected errors into INTERNAL_ERROR."""
    logger.exception(f"Unhandled error in {request.method} {request.url.path}")
    return await app_exception_handler(request, internal_error(details=str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def unauthorized() -> AppException:
    """Create missing bearer token exception."""
    return AppException("Access denied. No token provided.", "UNAUTHORIZED", 401)


def invalid_credentials() -> AppException:
    """Create invalid credentials exception."""
    return AppException("Invalid username or password", "INVALID_CREDENTIALS", 401)


def token_expired() -> AppException:
    """Create token expired exception."""
    return AppException("Token is invalid or has expired", "TOKEN_EXPIRED", 403)


def token_invalid() -> AppException:
    """Create invalid token exception."""
    return AppException("Invalid or malformed token", "TOKEN_INVALID", 403)


def account_disabled() -> AppException:
    """Create account disabled exception."""
    return AppException("Account has been disabled", "ACCOUNT_DISABLED", 403)


def username_exists(username: str) -> AppException:
    """Create username already exists exception."""
    return AppException(
        f"Username '{username}' already exists",
        "USERNAME_EXISTS",
        409,
        {"username": username}
    )


def product_not_found(
    codigo: Optional[str] = None,
    product_id: Optional[str] = None
) -> AppException:
    """Create product not found exception."""
    details = {}
    if codigo is not None:
        details["codigo"] = codigo
    if product_id is not None:
        details["id"] = product_id
    return AppException("Product not found", "PRODUCT_NOT_FOUND", 404, details)


def no_products_found() -> AppException:
    """Create exception for bulk operations on an empty catalog."""
    return AppException("No products found to delete", "PRODUCT_NOT_FOUND", 404)


def duplicate_key(codigo: str) -> AppException:
    """Create uniqueness violation exception."""
    return AppException(
        f"A product with codigo '{codigo}' already exists",
        "DUPLICATE_KEY",
        409,
        {"codigo": codigo}
    )


def invalid_identifier(value: str) -> AppException:
    """Create malformed internal identifier exception."""
    return AppException(
        "Invalid product ID format",
        "INVALID_IDENTIFIER",
        400,
        {"receivedId": value, "expectedFormat": "UUID"}
    )


def validation_failed(
    message: str = "Validation failed",
    details: Optional[Dict[str, Any]] = None
) -> AppException:
    """Create validation failure exception."""
    return AppException(message, "VALIDATION_ERROR", 400, details)


def internal_error(
    message: str = "Internal server error",
    details: Optional[str] = None
) -> AppException:
    """Create internal server error exception carrying the underlying error text."""
    return AppException(
        message,
        "INTERNAL_ERROR",
        500,
        {"details": details} if details else None
    )
