"""
==============================================================================
Product Catalog Endpoints
==============================================================================

CRUD endpoints for catalog products. Every route requires a bearer token.

Route order matters: ``/products/all`` is declared before
``/products/{codigo}`` so DELETE /products/all is not read as a codigo.

==============================================================================
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from perfumeria.catalog.models import ProductDocument
from perfumeria.catalog.store import CatalogStore
from perfumeria.core.dependencies import get_catalog_store, get_current_user
from perfumeria.schemas.product import (
    BulkUpsertResponse,
    DeleteResponse,
    LocationUpdate,
    ProductReplace,
)
from perfumeria.services.product_service import ProductService
from perfumeria.services.reconciliation_service import (
    InvalidEntryPolicy,
    StockReconciliationService,
)


router = APIRouter(
    prefix="/products",
    tags=["Products"],
    dependencies=[Depends(get_current_user)],
)


class ProductController:
    """Controller for product catalog operations."""

    def __init__(self, store: CatalogStore):
        self._store = store
        self._service = ProductService(store)

    def upload(self, payload: Any, policy: Optional[InvalidEntryPolicy]) -> BulkUpsertResponse:
        """Apply a bulk upload (single object or list)."""
        return StockReconciliationService(self._store, policy).reconcile(payload)

    def list_products(self) -> List[ProductDocument]:
        return self._service.list_products()

    def get_by_codigo(self, codigo: str) -> ProductDocument:
        return self._service.get_by_codigo(codigo)

    def get_by_id(self, product_id: str) -> ProductDocument:
        return self._service.get_by_id(product_id)

    def replace_by_codigo(self, codigo: str, data: ProductReplace) -> ProductDocument:
        return self._service.replace_by_codigo(codigo, data)

    def replace_by_id(self, product_id: str, data: ProductReplace) -> ProductDocument:
        return self._service.replace_by_id(product_id, data)

    def update_location(self, codigo: str, data: LocationUpdate) -> ProductDocument:
        return self._service.update_location(codigo, data.location)

    def delete_by_codigo(self, codigo: str) -> DeleteResponse:
        self._service.delete_by_codigo(codigo)
        return DeleteResponse(message="Product deleted successfully")

    def delete_by_id(self, product_id: str) -> DeleteResponse:
        self._service.delete_by_id(product_id)
        return DeleteResponse(message="Product deleted successfully")

    def delete_all(self) -> DeleteResponse:
        deleted = self._service.delete_all()
        return DeleteResponse(message=f"{deleted} products deleted", deleted_count=deleted)


# =============================================================================
# COLLECTION ROUTES
# =============================================================================

@router.post("", response_model=BulkUpsertResponse)
async def upload_products(
    payload: Any = Body(..., description="A product object or a list of product objects"),
    on_invalid: Optional[InvalidEntryPolicy] = Query(
        None,
        description="Override the configured invalid entry policy"
    ),
    store: CatalogStore = Depends(get_catalog_store)
):
    """
    Add products or update their stock.

    Descriptive fields are overwritten; ``stock`` is added to the stored
    stock of an existing product.
    """
    controller = ProductController(store)
    return controller.upload(payload, on_invalid)


@router.get("", response_model=List[ProductDocument])
async def list_products(store: CatalogStore = Depends(get_catalog_store)):
    """Retrieve all products."""
    controller = ProductController(store)
    return controller.list_products()


@router.delete("/all", response_model=DeleteResponse)
async def delete_all_products(store: CatalogStore = Depends(get_catalog_store)):
    """Remove all products. Returns 404 when there was nothing to delete."""
    controller = ProductController(store)
    return controller.delete_all()


# =============================================================================
# INTERNAL ID ROUTES
# =============================================================================

@router.get("/id/{product_id}", response_model=ProductDocument)
async def get_product_by_id(product_id: str, store: CatalogStore = Depends(get_catalog_store)):
    """Retrieve a product by internal id."""
    controller = ProductController(store)
    return controller.get_by_id(product_id)


@router.put("/id/{product_id}", response_model=ProductDocument)
async def replace_product_by_id(
    product_id: str,
    data: ProductReplace,
    store: CatalogStore = Depends(get_catalog_store)
):
    """Replace a product by internal id."""
    controller = ProductController(store)
    return controller.replace_by_id(product_id, data)


@router.delete("/id/{product_id}", response_model=DeleteResponse)
async def delete_product_by_id(product_id: str, store: CatalogStore = Depends(get_catalog_store)):
    """Remove a product by internal id."""
    controller = ProductController(store)
    return controller.delete_by_id(product_id)


# =============================================================================
# BUSINESS CODE ROUTES
# =============================================================================

@router.patch("/location/{codigo}", response_model=ProductDocument)
async def update_product_location(
    codigo: str,
    data: LocationUpdate,
    store: CatalogStore = Depends(get_catalog_store)
):
    """Update the location of a product."""
    controller = ProductController(store)
    return controller.update_location(codigo, data)


@router.get("/{codigo}", response_model=ProductDocument)
async def get_product(codigo: str, store: CatalogStore = Depends(get_catalog_store)):
    """Retrieve a single product by business code."""
    controller = ProductController(store)
    return controller.get_by_codigo(codigo)


@router.put("/{codigo}", response_model=ProductDocument)
async def replace_product(
    codigo: str,
    data: ProductReplace,
    store: CatalogStore = Depends(get_catalog_store)
):
    """Replace a product by business code."""
    controller = ProductController(store)
    return controller.replace_by_codigo(codigo, data)


@router.delete("/{codigo}", response_model=DeleteResponse)
async def delete_product(codigo: str, store: CatalogStore = Depends(get_catalog_store)):
    """Remove a product by business code."""
    controller = ProductController(store)
    return controller.delete_by_codigo(codigo)
