"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes between the API routers and the stores.

    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Service      │  ← Business Logic
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │  CatalogStore   │  ← Data Access
    └─────────────────┘

- AuthService: registration, login, token refresh
- ProductService: point reads, replaces and deletes
- StockReconciliationService: bulk uploads with stock increments

==============================================================================
"""

from .auth_service import AuthService
from .product_service import ProductService
from .reconciliation_service import InvalidEntryPolicy, StockReconciliationService

__all__ = [
    "AuthService",
    "ProductService",
    "InvalidEntryPolicy",
    "StockReconciliationService",
]
