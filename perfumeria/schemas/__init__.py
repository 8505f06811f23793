"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

- common: Shared response schemas
- auth: Registration, login and token schemas
- product: Product upload, replace and result schemas

==============================================================================
"""

from .common import HealthResponse
from .auth import (
    LoginRequest,
    RegisterRequest,
    RefreshRequest,
    UserInfo,
    TokenResponse,
    RegisterResponse,
)
from .product import (
    ProductIn,
    ProductReplace,
    LocationUpdate,
    FieldError,
    EntryError,
    BulkUpsertResponse,
    DeleteResponse,
)

__all__ = [
    # Common
    "HealthResponse",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "RefreshRequest",
    "UserInfo",
    "TokenResponse",
    "RegisterResponse",
    # Product
    "ProductIn",
    "ProductReplace",
    "LocationUpdate",
    "FieldError",
    "EntryError",
    "BulkUpsertResponse",
    "DeleteResponse",
]
