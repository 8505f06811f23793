"""
==============================================================================
Product Endpoint Tests
==============================================================================

Tests for the /products routes. Most run against the in-memory store; the
SQL flow at the end goes through the real session dependency.

==============================================================================
"""

from typing import Dict

import pytest
from fastapi.testclient import TestClient


def upload(client: TestClient, headers: Dict, body, **params):
    return client.post("/products", json=body, headers=headers, params=params)


class TestUploadProducts:
    """Tests for POST /products."""

    def test_upload_single_object(self, memory_client: TestClient, auth_headers, product_payload):
        response = upload(memory_client, auth_headers, product_payload)
        assert response.status_code == 200
        data = response.json()
        assert data == {
            "success": True,
            "status": "success",
            "insertedCount": 1,
            "modifiedCount": 0,
            "errors": [],
        }

    def test_upload_increments_stock(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        response = upload(memory_client, auth_headers, {**product_payload, "stock": 3})

        assert response.json()["modifiedCount"] == 1
        product = memory_client.get("/products/PF-001", headers=auth_headers).json()
        assert product["stock"] == 8

    def test_upload_overwrites_descriptive_fields(
        self, memory_client: TestClient, auth_headers, product_payload
    ):
        upload(memory_client, auth_headers, product_payload)
        upload(memory_client, auth_headers, {**product_payload, "precio": 99.5, "stock": 0})

        product = memory_client.get("/products/PF-001", headers=auth_headers).json()
        assert product["precio"] == 99.5
        assert product["stock"] == 5

    def test_upload_list(self, memory_client: TestClient, auth_headers, product_payload):
        body = [
            product_payload,
            {**product_payload, "codigo": "PF-002", "volumen": "50ml"},
        ]
        response = upload(memory_client, auth_headers, body)
        assert response.json()["insertedCount"] == 2
        assert len(memory_client.get("/products", headers=auth_headers).json()) == 2

    def test_upload_applies_defaults(self, memory_client: TestClient, auth_headers):
        upload(memory_client, auth_headers, {"codigo": "MIN-1"})

        product = memory_client.get("/products/MIN-1", headers=auth_headers).json()
        assert product["genero"] == "Unisex"
        assert product["stock"] == 0
        assert product["etiquetas"] == []
        assert product["volumen"] is None

    def test_upload_partial_skips_invalid_entries(
        self, memory_client: TestClient, auth_headers, product_payload
    ):
        body = [product_payload, {"nombre": "sin codigo"}, {**product_payload, "codigo": "PF-003"}]
        response = upload(memory_client, auth_headers, body)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "partial"
        assert data["insertedCount"] == 2
        assert len(data["errors"]) == 1
        assert data["errors"][0]["index"] == 1
        assert data["errors"][0]["errors"][0]["field"] == "codigo"

    def test_upload_abort_policy(self, memory_client: TestClient, auth_headers, product_payload):
        body = [product_payload, {**product_payload, "volumen": "30ml"}]
        response = upload(memory_client, auth_headers, body, on_invalid="abort")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["errors"][0]["index"] == 1
        assert memory_client.get("/products", headers=auth_headers).json() == []

    def test_upload_all_invalid(self, memory_client: TestClient, auth_headers):
        response = upload(memory_client, auth_headers, [{"codigo": ""}, {"codigo": "a/b"}])
        assert response.status_code == 400
        assert len(response.json()["error"]["details"]["errors"]) == 2

    @pytest.mark.parametrize("codigo", ["all", "ALL", " all "])
    def test_upload_rejects_reserved_codigo(
        self, memory_client: TestClient, auth_headers, product_payload, codigo
    ):
        """A product coded 'all' could never be deleted by code."""
        body = [product_payload, {**product_payload, "codigo": codigo}]
        response = upload(memory_client, auth_headers, body)

        data = response.json()
        assert data["status"] == "partial"
        assert data["errors"][0]["index"] == 1
        assert "reserved" in data["errors"][0]["errors"][0]["message"]
        assert len(memory_client.get("/products", headers=auth_headers).json()) == 1

    @pytest.mark.parametrize("body", [[], "text", 42])
    def test_upload_rejects_bad_bodies(self, memory_client: TestClient, auth_headers, body):
        response = upload(memory_client, auth_headers, body)
        assert response.status_code == 400

    def test_upload_unknown_policy(self, memory_client: TestClient, auth_headers, product_payload):
        response = upload(memory_client, auth_headers, product_payload, on_invalid="ignore")
        assert response.status_code == 400


class TestReadProducts:
    """Tests for the GET routes."""

    def test_list_empty(self, memory_client: TestClient, auth_headers):
        response = memory_client.get("/products", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_get_by_codigo(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        response = memory_client.get("/products/PF-001", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["nombre"] == "Acqua di Gio"
        assert data["volumen"] == "100ml"
        assert data["id"]

    def test_get_by_codigo_not_found(self, memory_client: TestClient, auth_headers):
        response = memory_client.get("/products/NOPE", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_get_by_id(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        product_id = memory_client.get("/products/PF-001", headers=auth_headers).json()["id"]

        response = memory_client.get(f"/products/id/{product_id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["codigo"] == "PF-001"

    def test_get_by_malformed_id(self, memory_client: TestClient, auth_headers):
        response = memory_client.get("/products/id/not-a-uuid", headers=auth_headers)
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_IDENTIFIER"
        assert error["details"]["receivedId"] == "not-a-uuid"

    def test_get_by_unknown_id(self, memory_client: TestClient, auth_headers):
        response = memory_client.get(
            "/products/id/00000000-0000-4000-8000-000000000000", headers=auth_headers
        )
        assert response.status_code == 404


class TestReplaceProducts:
    """Tests for PUT /products/{codigo} and /products/id/{id}."""

    def test_replace_resets_omitted_fields(
        self, memory_client: TestClient, auth_headers, product_payload
    ):
        upload(memory_client, auth_headers, product_payload)
        response = memory_client.put(
            "/products/PF-001",
            json={"nombre": "Nuevo", "stock": 2},
            headers=auth_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["codigo"] == "PF-001"
        assert data["nombre"] == "Nuevo"
        assert data["stock"] == 2
        assert data["marca"] == ""
        assert data["genero"] == "Unisex"

    def test_replace_sets_absolute_stock(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        memory_client.put("/products/PF-001", json={"stock": 1}, headers=auth_headers)
        product = memory_client.get("/products/PF-001", headers=auth_headers).json()
        assert product["stock"] == 1

    def test_replace_changes_codigo(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        response = memory_client.put(
            "/products/PF-001", json={"codigo": "PF-009"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert memory_client.get("/products/PF-001", headers=auth_headers).status_code == 404
        assert memory_client.get("/products/PF-009", headers=auth_headers).status_code == 200

    def test_replace_with_numeric_codigo(self, memory_client: TestClient, auth_headers, product_payload):
        """Numeric codes are accepted on PUT the same way as on POST."""
        upload(memory_client, auth_headers, product_payload)
        response = memory_client.put(
            "/products/PF-001", json={"codigo": 123, "stock": 4}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["codigo"] == "123"
        assert memory_client.get("/products/123", headers=auth_headers).json()["stock"] == 4

    def test_replace_with_reserved_codigo(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        response = memory_client.put(
            "/products/PF-001", json={"codigo": "all"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_replace_duplicate_codigo(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, [product_payload, {**product_payload, "codigo": "PF-002"}])
        response = memory_client.put(
            "/products/PF-001", json={"codigo": "PF-002"}, headers=auth_headers
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_KEY"

    def test_replace_empty_body(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        response = memory_client.put("/products/PF-001", json={}, headers=auth_headers)
        assert response.status_code == 400

    def test_replace_not_found(self, memory_client: TestClient, auth_headers):
        response = memory_client.put("/products/NOPE", json={"nombre": "x"}, headers=auth_headers)
        assert response.status_code == 404

    def test_replace_by_id(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        product_id = memory_client.get("/products/PF-001", headers=auth_headers).json()["id"]

        response = memory_client.put(
            f"/products/id/{product_id}", json={"nombre": "Por id"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["id"] == product_id
        assert response.json()["nombre"] == "Por id"


class TestUpdateLocation:
    """Tests for PATCH /products/location/{codigo}."""

    def test_update_location(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        response = memory_client.patch(
            "/products/location/PF-001", json={"location": "  B-07 "}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["location"] == "B-07"
        assert response.json()["stock"] == 5

    def test_update_location_blank(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        response = memory_client.patch(
            "/products/location/PF-001", json={"location": "   "}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_update_location_not_found(self, memory_client: TestClient, auth_headers):
        response = memory_client.patch(
            "/products/location/NOPE", json={"location": "B-07"}, headers=auth_headers
        )
        assert response.status_code == 404


class TestDeleteProducts:
    """Tests for the DELETE routes."""

    def test_delete_by_codigo(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        response = memory_client.delete("/products/PF-001", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert memory_client.get("/products/PF-001", headers=auth_headers).status_code == 404

    def test_delete_by_codigo_not_found(self, memory_client: TestClient, auth_headers):
        response = memory_client.delete("/products/NOPE", headers=auth_headers)
        assert response.status_code == 404

    def test_delete_by_id(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, product_payload)
        product_id = memory_client.get("/products/PF-001", headers=auth_headers).json()["id"]

        response = memory_client.delete(f"/products/id/{product_id}", headers=auth_headers)
        assert response.status_code == 200
        assert memory_client.get("/products", headers=auth_headers).json() == []

    def test_delete_by_malformed_id(self, memory_client: TestClient, auth_headers):
        response = memory_client.delete("/products/id/123", headers=auth_headers)
        assert response.status_code == 400

    def test_delete_all(self, memory_client: TestClient, auth_headers, product_payload):
        upload(memory_client, auth_headers, [product_payload, {**product_payload, "codigo": "PF-002"}])
        response = memory_client.delete("/products/all", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["deletedCount"] == 2
        assert memory_client.get("/products", headers=auth_headers).json() == []

    def test_delete_all_empty(self, memory_client: TestClient, auth_headers):
        response = memory_client.delete("/products/all", headers=auth_headers)
        assert response.status_code == 404


class TestSqlBackedFlow:
    """End-to-end flow through the SQL store."""

    def test_upload_read_replace_delete(self, client: TestClient, auth_headers, product_payload):
        assert upload(client, auth_headers, product_payload).json()["insertedCount"] == 1
        assert upload(client, auth_headers, {**product_payload, "stock": 3}).json()["modifiedCount"] == 1

        product = client.get("/products/PF-001", headers=auth_headers).json()
        assert product["stock"] == 8
        assert product["etiquetas"] == ["citrico", "acuatico"]

        replaced = client.put(
            f"/products/id/{product['id']}", json={"nombre": "Otro"}, headers=auth_headers
        ).json()
        assert replaced["stock"] == 0
        assert replaced["marca"] == ""

        assert client.delete("/products/all", headers=auth_headers).json()["deletedCount"] == 1
        assert client.delete("/products/all", headers=auth_headers).status_code == 404
