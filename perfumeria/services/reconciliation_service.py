"""
==============================================================================
Stock Reconciliation Service Module
==============================================================================

Bulk product upload ("delta feed") applied to the catalog.

Every upload entry describes a product and a stock *delta*, e.g. the units
of a new shipment. Descriptive fields overwrite what is stored; stock is
incremented. Uploading the same entry twice therefore doubles the stock
change but leaves the descriptive fields as they were.

Pipeline:
--------
    body ──▶ normalize ──▶ validate each entry ──▶ build upserts ──▶ bulk_write
              (object       (collect EntryError      (filter: codigo,
               → [object])   per invalid entry)        $set fields,
                                                       $inc stock)

Invalid Entry Policy:
--------------------
- skip:  invalid entries are reported, valid ones are applied
- abort: any invalid entry rejects the whole upload, nothing is written

==============================================================================
"""

from __future__ import annotations

import enum
import logging
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from perfumeria.catalog.store import CatalogStore, StoreError, UpsertOperation
from perfumeria.config import get_settings
from perfumeria.core import exceptions
from perfumeria.core.exceptions import format_validation_errors
from perfumeria.schemas.product import BulkUpsertResponse, EntryError, FieldError, ProductIn


# Module logger
logger = logging.getLogger(__name__)


class InvalidEntryPolicy(str, enum.Enum):
    """What a bulk upload does with entries that fail validation."""

    SKIP = "skip"
    ABORT = "abort"

    def __str__(self) -> str:
        return self.value


class StockReconciliationService:
    """
    Applies bulk product uploads to a CatalogStore.

    Attributes:
        _store: Target catalog store
        _policy: Invalid entry policy for this service instance

    Example:
        >>> service = StockReconciliationService(store)
        >>> service.reconcile({"codigo": "X", "volumen": "50ml", "stock": 5})
        BulkUpsertResponse(success=True, status='success', inserted_count=1, ...)
        >>> service.reconcile({"codigo": "X", "volumen": "50ml", "stock": 3})
        >>> store.find_by_codigo("X").stock
        8
    """

    def __init__(
        self,
        store: CatalogStore,
        policy: Optional[InvalidEntryPolicy] = None
    ) -> None:
        self._store = store
        self._policy = InvalidEntryPolicy(
            policy or get_settings().invalid_entry_policy
        )

    @property
    def policy(self) -> InvalidEntryPolicy:
        return self._policy

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def reconcile(self, payload: Any) -> BulkUpsertResponse:
        """
        Validate and apply an upload.

        Args:
            payload: A single product object or a list of them

        Returns:
            BulkUpsertResponse with inserted/modified counts and the
            per-entry errors of skipped entries

        Raises:
            AppException: VALIDATION_ERROR if the body is not an object or
                list, if nothing valid is left, or if an entry is invalid
                under the abort policy
            AppException: INTERNAL_ERROR if the store rejects the batch
        """
        entries = self.normalize(payload)
        products, errors = self.validate_entries(entries)

        if errors and (self._policy is InvalidEntryPolicy.ABORT or not products):
            logger.warning(
                f"Upload rejected: {len(errors)} of {len(entries)} entries invalid "
                f"(policy={self._policy})"
            )
            raise exceptions.validation_failed(
                "Missing or invalid required fields",
                {"errors": [error.model_dump() for error in errors]}
            )

        operations = [self.build_operation(product) for product in products]

        try:
            result = self._store.bulk_write(operations)
        except StoreError as e:
            logger.error(f"❌ Bulk write of {len(operations)} operations failed: {e}")
            raise exceptions.internal_error(details=str(e))

        logger.info(
            f"✅ Upload applied: {result.inserted_count} inserted, "
            f"{result.modified_count} modified, {len(errors)} skipped"
        )

        return BulkUpsertResponse(
            status="partial" if errors else "success",
            inserted_count=result.inserted_count,
            modified_count=result.modified_count,
            errors=errors,
        )

    # =========================================================================
    # PIPELINE STEPS
    # =========================================================================

    @staticmethod
    def normalize(payload: Any) -> List[Any]:
        """
        Turn the request body into a list of entries.

        Raises:
            AppException: VALIDATION_ERROR for empty lists and scalar bodies
        """
        if isinstance(payload, dict):
            return [payload]

        if isinstance(payload, list):
            if not payload:
                raise exceptions.validation_failed("No products provided")
            return payload

        raise exceptions.validation_failed(
            "Body must be a product object or a list of product objects"
        )

    @staticmethod
    def validate_entries(entries: Sequence[Any]) -> Tuple[List[ProductIn], List[EntryError]]:
        """Validate every entry independently, keeping input order."""
        products: List[ProductIn] = []
        errors: List[EntryError] = []

        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                errors.append(EntryError(
                    index=index,
                    errors=[FieldError(field="body", message="Entry must be a JSON object")]
                ))
                continue

            try:
                products.append(ProductIn.model_validate(entry))
            except ValidationError as e:
                codigo = entry.get("codigo")
                errors.append(EntryError(
                    index=index,
                    codigo=codigo if isinstance(codigo, str) else None,
                    errors=[FieldError(**error) for error in format_validation_errors(e.errors())]
                ))

        return products, errors

    @staticmethod
    def build_operation(product: ProductIn) -> UpsertOperation:
        """Upsert keyed by codigo: set every descriptive field, increment stock."""
        return UpsertOperation(
            codigo=product.codigo,
            set_fields=product.descriptive_values(),
            inc_stock=product.stock,
        )
