"""
==============================================================================
Catalog Store Module
==============================================================================

Storage contract for catalog products.

Every backend implements CatalogStore. Route handlers receive a store
through the ``get_catalog_store`` dependency, never a global, so tests can
swap the SQL store for InMemoryCatalogStore.

Upsert Semantics:
----------------
    UpsertOperation(codigo="X", set_fields={...}, inc_stock=5)

    codigo unseen   ──▶ insert defaults + set_fields, stock = inc_stock
    codigo exists   ──▶ overwrite set_fields, stock = stock + inc_stock

A matched product whose fields and stock end up unchanged is counted in
``matched_count`` but not in ``modified_count``.

==============================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from .models import ProductDocument


# =============================================================================
# STORE ERRORS
# =============================================================================

class StoreError(Exception):
    """Backend failure while reading or writing the catalog."""


class DuplicateKeyError(StoreError):
    """A write would give two products the same codigo."""

    def __init__(self, codigo: str):
        self.codigo = codigo
        super().__init__(f"Duplicate key: codigo '{codigo}' already exists")


class InvalidIdentifierError(StoreError):
    """An internal identifier is not in the store's format."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid identifier: {value!r}")


# =============================================================================
# BATCH WRITE TYPES
# =============================================================================

class UpsertOperation(BaseModel):
    """One insert-if-absent, else merge-and-increment-stock operation."""

    codigo: str
    set_fields: Dict[str, Any] = Field(default_factory=dict)
    inc_stock: int = 0


class BulkWriteResult(BaseModel):
    """Counters reported by CatalogStore.bulk_write."""

    inserted_count: int = 0
    matched_count: int = 0
    modified_count: int = 0


# =============================================================================
# STORE CONTRACT
# =============================================================================

class CatalogStore(ABC):
    """
    Abstract catalog store.

    Lookups return None (or False/0 for deletes) when nothing matches;
    the service layer decides whether that is a 404.

    Raises (any method):
        InvalidIdentifierError: malformed internal identifier
        DuplicateKeyError: uniqueness violation on codigo
        StoreError: any other backend failure
    """

    @abstractmethod
    def bulk_write(self, operations: Sequence[UpsertOperation]) -> BulkWriteResult:
        """Apply upsert operations in order as one batch."""

    @abstractmethod
    def find_all(self) -> List[ProductDocument]:
        """Return every product."""

    @abstractmethod
    def find_by_codigo(self, codigo: str) -> Optional[ProductDocument]:
        """Return the product with this business code."""

    @abstractmethod
    def find_by_id(self, product_id: str) -> Optional[ProductDocument]:
        """Return the product with this internal identifier."""

    @abstractmethod
    def replace(self, product_id: str, fields: Dict[str, Any]) -> Optional[ProductDocument]:
        """
        Replace every field of a product except its identifier.

        ``fields`` holds codigo, stock and all descriptive fields.
        """

    @abstractmethod
    def set_location(self, codigo: str, location: str) -> Optional[ProductDocument]:
        """Update only the location of a product."""

    @abstractmethod
    def delete_by_codigo(self, codigo: str) -> bool:
        """Delete a product by business code. Returns True if one was deleted."""

    @abstractmethod
    def delete_by_id(self, product_id: str) -> bool:
        """Delete a product by internal identifier."""

    @abstractmethod
    def delete_all(self) -> int:
        """Delete every product and return how many were deleted."""

    def ping(self) -> bool:
        """Return True if the backend is reachable."""
        return True
