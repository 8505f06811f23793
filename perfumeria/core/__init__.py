"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

Modules:
--------
- exceptions: AppException class and error factory functions
- security: SecurityManager for hashing and JWT operations
- dependencies: FastAPI dependency injection functions

Usage:
------
    from perfumeria.core import AppException, get_current_user

    # Or use exception factory functions via module
    from perfumeria.core import exceptions
    raise exceptions.product_not_found(codigo="PF-001")

==============================================================================
"""

from .exceptions import (
    AppException,
    register_exception_handlers,
)
from .security import SecurityManager, get_security_manager
from .dependencies import (
    AuthenticationManager,
    get_catalog_store,
    get_current_user,
)

__all__ = [
    # Exceptions
    "AppException",
    "register_exception_handlers",
    # Security
    "SecurityManager",
    "get_security_manager",
    # Dependencies
    "AuthenticationManager",
    "get_catalog_store",
    "get_current_user",
]
