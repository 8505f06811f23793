"""
==============================================================================
Stock Reconciliation Tests
==============================================================================

Tests for StockReconciliationService against the in-memory store.

==============================================================================
"""

import pytest

from perfumeria.catalog.memory_store import InMemoryCatalogStore
from perfumeria.catalog.models import Genero, Volumen
from perfumeria.catalog.store import StoreError
from perfumeria.core.exceptions import AppException
from perfumeria.services.reconciliation_service import (
    InvalidEntryPolicy,
    StockReconciliationService,
)


class FailingStore(InMemoryCatalogStore):
    def bulk_write(self, operations):
        raise StoreError("connection reset")


@pytest.fixture
def service(memory_store: InMemoryCatalogStore) -> StockReconciliationService:
    return StockReconciliationService(memory_store, InvalidEntryPolicy.SKIP)


class TestStockAccumulation:
    """Stock deltas accumulate, descriptive fields are overwritten."""

    def test_deltas_add_up(self, service, memory_store):
        service.reconcile({"codigo": "X", "volumen": "50ml", "stock": 5})
        result = service.reconcile({"codigo": "X", "volumen": "50ml", "stock": 3})

        assert result.inserted_count == 0
        assert result.modified_count == 1
        assert memory_store.find_by_codigo("X").stock == 8

    def test_negative_delta(self, service, memory_store):
        service.reconcile({"codigo": "X", "stock": 5})
        service.reconcile({"codigo": "X", "stock": -2})
        assert memory_store.find_by_codigo("X").stock == 3

    def test_descriptive_fields_are_idempotent(self, service, memory_store):
        entry = {"codigo": "X", "nombre": "Bleu", "genero": "Masculino", "stock": 0}
        service.reconcile(entry)
        result = service.reconcile(entry)

        assert result.modified_count == 0
        product = memory_store.find_by_codigo("X")
        assert product.nombre == "Bleu"
        assert product.genero is Genero.MASCULINO

    def test_later_upload_overwrites_fields(self, service, memory_store):
        service.reconcile({"codigo": "X", "volumen": "50ml", "marca": "Old"})
        service.reconcile({"codigo": "X", "volumen": "75ml", "marca": "New"})

        product = memory_store.find_by_codigo("X")
        assert product.marca == "New"
        assert product.volumen is Volumen.ML_75

    def test_numeric_codigo_is_accepted(self, service, memory_store):
        service.reconcile({"codigo": 7501, "stock": 1})
        assert memory_store.find_by_codigo("7501").stock == 1

    def test_codigo_is_trimmed(self, service, memory_store):
        service.reconcile({"codigo": "  X-1 ", "stock": 1})
        assert memory_store.find_by_codigo("X-1") is not None


class TestInvalidEntries:
    """Invalid entry handling under both policies."""

    def test_skip_reports_invalid_entry(self, service, memory_store):
        result = service.reconcile([
            {"codigo": "A", "stock": 1},
            {"codigo": "B", "stock": "many"},
            {"codigo": "C", "stock": 1},
        ])

        assert result.status == "partial"
        assert result.inserted_count == 2
        assert [e.index for e in result.errors] == [1]
        assert result.errors[0].codigo == "B"
        assert result.errors[0].errors[0].field == "stock"
        assert memory_store.find_by_codigo("B") is None

    def test_non_object_entry(self, service):
        result = service.reconcile([{"codigo": "A"}, "oops"])
        assert result.errors[0].index == 1
        assert result.errors[0].errors[0].field == "body"

    def test_abort_writes_nothing(self, memory_store):
        service = StockReconciliationService(memory_store, InvalidEntryPolicy.ABORT)

        with pytest.raises(AppException) as exc_info:
            service.reconcile([{"codigo": "A"}, {"codigo": ""}])

        assert exc_info.value.status_code == 400
        assert exc_info.value.details["errors"][0]["index"] == 1
        assert memory_store.find_all() == []

    def test_all_invalid_fails_under_skip(self, service):
        with pytest.raises(AppException) as exc_info:
            service.reconcile([{"nombre": "x"}])
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_empty_list(self, service):
        with pytest.raises(AppException) as exc_info:
            service.reconcile([])
        assert exc_info.value.message == "No products provided"

    def test_policy_defaults_to_settings(self, memory_store):
        assert StockReconciliationService(memory_store).policy is InvalidEntryPolicy.SKIP


class TestStoreFailures:
    """Store errors surface as INTERNAL_ERROR."""

    def test_store_error(self):
        service = StockReconciliationService(FailingStore())

        with pytest.raises(AppException) as exc_info:
            service.reconcile({"codigo": "A"})

        assert exc_info.value.status_code == 500
        assert exc_info.value.details == {"details": "connection reset"}
