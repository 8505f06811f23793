"""
==============================================================================
SQL Catalog Store
==============================================================================

CatalogStore backed by the ``products`` table through a SQLAlchemy session.

Batch Writes:
------------
bulk_write() applies every UpsertOperation inside the request session and
commits once. Stock on existing rows is adjusted with a server-side
``UPDATE products SET stock = stock + :delta`` so concurrent uploads for the
same codigo never lose an increment.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from perfumeria.db.models import ProductRecord
from perfumeria.utils.validators import IdentifierValidator

from .models import DESCRIPTIVE_FIELDS, ProductDocument
from .store import (
    BulkWriteResult,
    CatalogStore,
    DuplicateKeyError,
    InvalidIdentifierError,
    StoreError,
    UpsertOperation,
)


# Module logger
logger = logging.getLogger(__name__)


class SqlCatalogStore(CatalogStore):
    """
    SQLAlchemy implementation of CatalogStore.

    Attributes:
        _db: Request-scoped SQLAlchemy session

    Example:
        >>> store = SqlCatalogStore(session)
        >>> store.bulk_write([UpsertOperation(codigo="PF-001", inc_stock=5)])
        BulkWriteResult(inserted_count=1, matched_count=0, modified_count=0)
    """

    def __init__(self, db: Session) -> None:
        self._db = db
        self._ids = IdentifierValidator()

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _checked_id(self, product_id: str) -> str:
        normalized = self._ids.normalize(product_id)
        if normalized is None:
            raise InvalidIdentifierError(product_id)
        return normalized

    def _row_by_codigo(self, codigo: str) -> Optional[ProductRecord]:
        return self._db.query(ProductRecord).filter(
            ProductRecord.codigo == codigo
        ).first()

    def _commit(self, codigo: Optional[str] = None) -> None:
        """Commit, translating database errors into store errors."""
        try:
            self._db.commit()
        except IntegrityError as e:
            self._db.rollback()
            logger.warning(f"Integrity error on commit: {e.orig}")
            raise DuplicateKeyError(codigo or "") from e
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error(f"Commit failed: {e}")
            raise StoreError(str(e)) from e

    @staticmethod
    def _to_document(row: ProductRecord) -> ProductDocument:
        return ProductDocument.model_validate(row)

    # =========================================================================
    # WRITES
    # =========================================================================

    def bulk_write(self, operations: Sequence[UpsertOperation]) -> BulkWriteResult:
        result = BulkWriteResult()

        try:
            for operation in operations:
                row = self._row_by_codigo(operation.codigo)

                if row is None:
                    row = ProductRecord(
                        codigo=operation.codigo,
                        stock=operation.inc_stock,
                        **operation.set_fields
                    )
                    self._db.add(row)
                    # Later operations in the same batch must see this row
                    self._db.flush()
                    result.inserted_count += 1
                    continue

                result.matched_count += 1

                changed = operation.inc_stock != 0 or any(
                    getattr(row, field) != value
                    for field, value in operation.set_fields.items()
                )
                if not changed:
                    continue

                self._db.execute(
                    update(ProductRecord)
                    .where(ProductRecord.id == row.id)
                    .values(
                        stock=ProductRecord.stock + operation.inc_stock,
                        **operation.set_fields
                    )
                    .execution_options(synchronize_session="fetch")
                )
                result.modified_count += 1

        except IntegrityError as e:
            self._db.rollback()
            logger.error(f"Bulk write rejected: {e.orig}")
            raise StoreError(f"Bulk write rejected: {e.orig}") from e
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error(f"Bulk write failed: {e}")
            raise StoreError(str(e)) from e

        self._commit()
        logger.debug(f"SQL bulk write: {result}")
        return result

    def replace(self, product_id: str, fields: Dict[str, Any]) -> Optional[ProductDocument]:
        row = self._db.get(ProductRecord, self._checked_id(product_id))
        if row is None:
            return None

        codigo = fields.get("codigo", row.codigo)
        owner = self._row_by_codigo(codigo)
        if owner is not None and owner.id != row.id:
            raise DuplicateKeyError(codigo)

        defaults = ProductDocument(id=row.id, codigo=codigo)
        for field in DESCRIPTIVE_FIELDS:
            setattr(row, field, fields.get(field, getattr(defaults, field)))
        row.codigo = codigo
        row.stock = fields.get("stock", 0)

        self._commit(codigo)
        self._db.refresh(row)
        return self._to_document(row)

    def set_location(self, codigo: str, location: str) -> Optional[ProductDocument]:
        row = self._row_by_codigo(codigo)
        if row is None:
            return None

        row.location = location
        self._commit(codigo)
        self._db.refresh(row)
        return self._to_document(row)

    # =========================================================================
    # READS
    # =========================================================================

    def find_all(self) -> List[ProductDocument]:
        rows = self._db.query(ProductRecord).order_by(ProductRecord.created_at).all()
        return [self._to_document(row) for row in rows]

    def find_by_codigo(self, codigo: str) -> Optional[ProductDocument]:
        row = self._row_by_codigo(codigo)
        return self._to_document(row) if row else None

    def find_by_id(self, product_id: str) -> Optional[ProductDocument]:
        row = self._db.get(ProductRecord, self._checked_id(product_id))
        return self._to_document(row) if row else None

    # =========================================================================
    # DELETES
    # =========================================================================

    def delete_by_codigo(self, codigo: str) -> bool:
        deleted = self._db.query(ProductRecord).filter(
            ProductRecord.codigo == codigo
        ).delete(synchronize_session=False)
        self._commit()
        return deleted > 0

    def delete_by_id(self, product_id: str) -> bool:
        deleted = self._db.query(ProductRecord).filter(
            ProductRecord.id == self._checked_id(product_id)
        ).delete(synchronize_session=False)
        self._commit()
        return deleted > 0

    def delete_all(self) -> int:
        deleted = self._db.query(ProductRecord).delete(synchronize_session=False)
        self._commit()
        return deleted

    def ping(self) -> bool:
        try:
            self._db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
