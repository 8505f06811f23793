"""
==============================================================================
Catalog Package - Product Storage
==============================================================================

Product models and the storage contract for the catalog.

Classes:
--------
- ProductFields / ProductDocument: Pydantic product models
- CatalogStore: abstract store, UpsertOperation / BulkWriteResult
- InMemoryCatalogStore: dictionary backed store
- SqlCatalogStore: SQLAlchemy backed store (import from
  ``perfumeria.catalog.sql_store``; it depends on the ORM models)

==============================================================================
"""

from .models import DESCRIPTIVE_FIELDS, Genero, ProductDocument, ProductFields, Volumen
from .store import (
    BulkWriteResult,
    CatalogStore,
    DuplicateKeyError,
    InvalidIdentifierError,
    StoreError,
    UpsertOperation,
)
from .memory_store import InMemoryCatalogStore

__all__ = [
    "DESCRIPTIVE_FIELDS",
    "Genero",
    "Volumen",
    "ProductFields",
    "ProductDocument",
    "CatalogStore",
    "UpsertOperation",
    "BulkWriteResult",
    "StoreError",
    "DuplicateKeyError",
    "InvalidIdentifierError",
    "InMemoryCatalogStore",
]
