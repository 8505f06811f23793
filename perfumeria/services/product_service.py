"""
==============================================================================
Product Service Module
==============================================================================

Point reads, replacements and deletes on the catalog.

Store outcomes are mapped onto the API error taxonomy here:

    None / False returned      → PRODUCT_NOT_FOUND (404)
    InvalidIdentifierError     → INVALID_IDENTIFIER (400)
    DuplicateKeyError          → DUPLICATE_KEY (409)
    StoreError                 → INTERNAL_ERROR (500)

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List

from perfumeria.catalog.models import DESCRIPTIVE_FIELDS, ProductDocument
from perfumeria.catalog.store import (
    CatalogStore,
    DuplicateKeyError,
    InvalidIdentifierError,
    StoreError,
)
from perfumeria.core import exceptions
from perfumeria.schemas.product import ProductReplace


# Module logger
logger = logging.getLogger(__name__)


class ProductService:
    """
    Catalog operations keyed by business code or internal id.

    Attributes:
        _store: Catalog store injected by the route layer

    Example:
        >>> service = ProductService(store)
        >>> service.get_by_codigo("PF-001").stock
        8
        >>> service.update_location("PF-001", "A-12")
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def list_products(self) -> List[ProductDocument]:
        """Return every product in the catalog."""
        try:
            return self._store.find_all()
        except StoreError as e:
            raise self._internal(e)

    def get_by_codigo(self, codigo: str) -> ProductDocument:
        """
        Raises:
            AppException: PRODUCT_NOT_FOUND if no product has this codigo
        """
        try:
            product = self._store.find_by_codigo(codigo)
        except StoreError as e:
            raise self._internal(e)

        if product is None:
            raise exceptions.product_not_found(codigo=codigo)
        return product

    def get_by_id(self, product_id: str) -> ProductDocument:
        """
        Raises:
            AppException: INVALID_IDENTIFIER if the id is malformed
            AppException: PRODUCT_NOT_FOUND if no product has this id
        """
        try:
            product = self._store.find_by_id(product_id)
        except InvalidIdentifierError:
            logger.warning(f"Invalid ID format: {product_id}")
            raise exceptions.invalid_identifier(product_id)
        except StoreError as e:
            raise self._internal(e)

        if product is None:
            raise exceptions.product_not_found(product_id=product_id)
        return product

    # =========================================================================
    # UPDATE OPERATIONS
    # =========================================================================

    def replace_by_codigo(self, codigo: str, data: ProductReplace) -> ProductDocument:
        """Replace the product with this codigo; the body may rename it."""
        current = self.get_by_codigo(codigo)
        return self._replace(current, data)

    def replace_by_id(self, product_id: str, data: ProductReplace) -> ProductDocument:
        """Replace the product with this internal id."""
        current = self.get_by_id(product_id)
        return self._replace(current, data)

    def _replace(self, current: ProductDocument, data: ProductReplace) -> ProductDocument:
        fields = data.model_dump(include=set(DESCRIPTIVE_FIELDS) | {"stock"})
        fields["codigo"] = data.codigo or current.codigo

        try:
            product = self._store.replace(current.id, fields)
        except DuplicateKeyError as e:
            logger.warning(f"Replace of {current.codigo} rejected: {e}")
            raise exceptions.duplicate_key(e.codigo)
        except StoreError as e:
            raise self._internal(e)

        if product is None:
            # Deleted between the lookup and the write
            raise exceptions.product_not_found(codigo=current.codigo)

        logger.info(f"✅ Product replaced: {current.codigo} (id={current.id})")
        return product

    def update_location(self, codigo: str, location: str) -> ProductDocument:
        """Change only the location of a product."""
        try:
            product = self._store.set_location(codigo, location)
        except StoreError as e:
            raise self._internal(e)

        if product is None:
            raise exceptions.product_not_found(codigo=codigo)

        logger.info(f"✅ Location of {codigo} set to {location!r}")
        return product

    # =========================================================================
    # DELETE OPERATIONS
    # =========================================================================

    def delete_by_codigo(self, codigo: str) -> None:
        try:
            deleted = self._store.delete_by_codigo(codigo)
        except StoreError as e:
            raise self._internal(e)

        if not deleted:
            raise exceptions.product_not_found(codigo=codigo)
        logger.info(f"🗑️ Product deleted: {codigo}")

    def delete_by_id(self, product_id: str) -> None:
        try:
            deleted = self._store.delete_by_id(product_id)
        except InvalidIdentifierError:
            logger.warning(f"Invalid ID format: {product_id}")
            raise exceptions.invalid_identifier(product_id)
        except StoreError as e:
            raise self._internal(e)

        if not deleted:
            raise exceptions.product_not_found(product_id=product_id)
        logger.info(f"🗑️ Product deleted: id={product_id}")

    def delete_all(self) -> int:
        """
        Delete every product.

        Raises:
            AppException: PRODUCT_NOT_FOUND when the catalog was already empty
        """
        try:
            deleted = self._store.delete_all()
        except StoreError as e:
            raise self._internal(e)

        if deleted == 0:
            raise exceptions.no_products_found()

        logger.warning(f"🗑️ Deleted all products: {deleted}")
        return deleted

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _internal(error: StoreError):
        logger.error(f"❌ Catalog store error: {error}")
        return exceptions.internal_error(details=str(error))
