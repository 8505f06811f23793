"""
==============================================================================
In-Memory Catalog Store
==============================================================================

Dictionary backed CatalogStore for tests and throwaway local runs.

==============================================================================
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from perfumeria.utils.validators import IdentifierValidator

from .models import ProductDocument, ProductFields
from .store import (
    BulkWriteResult,
    CatalogStore,
    DuplicateKeyError,
    InvalidIdentifierError,
    UpsertOperation,
)


logger = logging.getLogger(__name__)


class InMemoryCatalogStore(CatalogStore):
    """
    CatalogStore keeping products in a dict keyed by internal id.

    Example:
        >>> store = InMemoryCatalogStore()
        >>> store.bulk_write([UpsertOperation(codigo="X", inc_stock=5)])
        BulkWriteResult(inserted_count=1, matched_count=0, modified_count=0)
    """

    def __init__(self) -> None:
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._ids = IdentifierValidator()

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _id_for_codigo(self, codigo: str) -> Optional[str]:
        for product_id, document in self._documents.items():
            if document["codigo"] == codigo:
                return product_id
        return None

    def _checked_id(self, product_id: str) -> str:
        normalized = self._ids.normalize(product_id)
        if normalized is None:
            raise InvalidIdentifierError(product_id)
        return normalized

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _to_document(document: Dict[str, Any]) -> ProductDocument:
        return ProductDocument.model_validate(document)

    # =========================================================================
    # WRITES
    # =========================================================================

    def bulk_write(self, operations: Sequence[UpsertOperation]) -> BulkWriteResult:
        result = BulkWriteResult()

        for operation in operations:
            product_id = self._id_for_codigo(operation.codigo)

            if product_id is None:
                document = ProductFields().model_dump()
                document.update(copy.deepcopy(operation.set_fields))
                document.update({
                    "id": self._ids.generate(),
                    "codigo": operation.codigo,
                    "stock": operation.inc_stock,
                    "created_at": self._now(),
                    "updated_at": self._now(),
                })
                self._documents[document["id"]] = document
                result.inserted_count += 1
                continue

            document = self._documents[product_id]
            result.matched_count += 1

            changed = operation.inc_stock != 0 or any(
                document.get(field) != value
                for field, value in operation.set_fields.items()
            )
            document.update(copy.deepcopy(operation.set_fields))
            document["stock"] += operation.inc_stock

            if changed:
                document["updated_at"] = self._now()
                result.modified_count += 1

        logger.debug(f"In-memory bulk write: {result}")
        return result

    def replace(self, product_id: str, fields: Dict[str, Any]) -> Optional[ProductDocument]:
        product_id = self._checked_id(product_id)
        document = self._documents.get(product_id)
        if document is None:
            return None

        codigo = fields.get("codigo", document["codigo"])
        owner = self._id_for_codigo(codigo)
        if owner is not None and owner != product_id:
            raise DuplicateKeyError(codigo)

        replacement = ProductFields().model_dump()
        replacement.update(fields)
        replacement.update({
            "id": product_id,
            "codigo": codigo,
            "stock": fields.get("stock", 0),
            "created_at": document["created_at"],
            "updated_at": self._now(),
        })
        self._documents[product_id] = replacement
        return self._to_document(replacement)

    def set_location(self, codigo: str, location: str) -> Optional[ProductDocument]:
        product_id = self._id_for_codigo(codigo)
        if product_id is None:
            return None

        document = self._documents[product_id]
        document["location"] = location
        document["updated_at"] = self._now()
        return self._to_document(document)

    # =========================================================================
    # READS
    # =========================================================================

    def find_all(self) -> List[ProductDocument]:
        return [self._to_document(document) for document in self._documents.values()]

    def find_by_codigo(self, codigo: str) -> Optional[ProductDocument]:
        product_id = self._id_for_codigo(codigo)
        if product_id is None:
            return None
        return self._to_document(self._documents[product_id])

    def find_by_id(self, product_id: str) -> Optional[ProductDocument]:
        document = self._documents.get(self._checked_id(product_id))
        if document is None:
            return None
        return self._to_document(document)

    # =========================================================================
    # DELETES
    # =========================================================================

    def delete_by_codigo(self, codigo: str) -> bool:
        product_id = self._id_for_codigo(codigo)
        if product_id is None:
            return False
        del self._documents[product_id]
        return True

    def delete_by_id(self, product_id: str) -> bool:
        return self._documents.pop(self._checked_id(product_id), None) is not None

    def delete_all(self) -> int:
        deleted = len(self._documents)
        self._documents.clear()
        return deleted
