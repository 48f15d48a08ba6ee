"""
Tests para productos e inventario: unicidad de SKU/código de barras,
ajustes de stock con movimientos y alertas de stock bajo.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def product(client, auth_headers):
    response = client.post("/products/", json={
        "name": "Espresso beans 1kg",
        "sku": "ESP-1KG",
        "barcode": "6001234500011",
        "price": "24.50",
        "quantity_in_stock": 12,
    }, headers=auth_headers)
    assert response.status_code == 201
    return response.json()


class TestProductAPI:

    def test_create_product_logs_initial_stock(self, client, auth_headers, product):
        movements = client.get(f"/products/{product['id']}/movements", headers=auth_headers).json()
        assert len(movements) == 1
        assert movements[0]["movement_type"] == "IN"
        assert movements[0]["quantity"] == 12

    def test_duplicate_sku_and_barcode(self, client, auth_headers, product):
        response = client.post("/products/", json={"name": "Other", "sku": "ESP-1KG", "price": "1"},
                               headers=auth_headers)
        assert response.status_code == 409
        response = client.post("/products/", json={"name": "Other", "barcode": "6001234500011", "price": "1"},
                               headers=auth_headers)
        assert response.status_code == 409

    def test_blank_sku_allowed_many_times(self, client, auth_headers):
        for name in ("Croissant", "Muffin"):
            response = client.post("/products/", json={"name": name, "sku": " ", "price": "2"}, headers=auth_headers)
            assert response.status_code == 201
            assert response.json()["sku"] is None

    def test_negative_initial_stock_rejected(self, client, auth_headers):
        response = client.post("/products/", json={"name": "X", "price": "1", "quantity_in_stock": -1},
                               headers=auth_headers)
        assert response.status_code == 422

    def test_search_and_in_stock_filter(self, client, auth_headers, product):
        client.post("/products/", json={"name": "Green tea", "price": "5"}, headers=auth_headers)

        data = client.get("/products/", params={"search": "esp"}, headers=auth_headers).json()
        assert [p["name"] for p in data["products"]] == ["Espresso beans 1kg"]

        data = client.get("/products/", params={"in_stock_only": True}, headers=auth_headers).json()
        assert data["total"] == 1

    def test_barcode_lookup(self, client, auth_headers, product):
        response = client.get("/products/barcode/6001234500011", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["id"] == product["id"]

        assert client.get("/products/barcode/123", headers=auth_headers).status_code == 400
        assert client.get("/products/barcode/99999999", headers=auth_headers).status_code == 404

    def test_update_product(self, client, auth_headers, product):
        response = client.patch(f"/products/{product['id']}", json={"price": "26.00"}, headers=auth_headers)
        assert response.status_code == 200
        assert Decimal(response.json()["price"]) == Decimal("26.00")
        assert response.json()["quantity_in_stock"] == 12

    def test_delete_product(self, client, auth_headers, product):
        assert client.delete(f"/products/{product['id']}", headers=auth_headers).status_code == 204
        assert client.get(f"/products/{product['id']}", headers=auth_headers).status_code == 404

    def test_products_are_tenant_scoped(self, client, other_auth_headers, product):
        assert client.get(f"/products/{product['id']}", headers=other_auth_headers).status_code == 404
        assert client.get("/products/barcode/6001234500011", headers=other_auth_headers).status_code == 404


class TestStockAdjustments:

    def test_adjust_stock_records_movement(self, client, auth_headers, product):
        response = client.post(f"/products/{product['id']}/adjust-stock",
                               json={"delta": -5, "notes": "Damaged"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["quantity_in_stock"] == 7

        movements = client.get(f"/products/{product['id']}/movements", headers=auth_headers).json()
        adjustments = [m for m in movements if m["movement_type"] == "ADJ"]
        assert len(adjustments) == 1
        assert adjustments[0]["quantity"] == -5
        assert adjustments[0]["notes"] == "Damaged"

    def test_cannot_go_negative(self, client, auth_headers, product):
        response = client.post(f"/products/{product['id']}/adjust-stock", json={"delta": -13}, headers=auth_headers)
        assert response.status_code == 409
        assert client.get(f"/products/{product['id']}", headers=auth_headers).json()["quantity_in_stock"] == 12

    def test_zero_delta_rejected(self, client, auth_headers, product):
        response = client.post(f"/products/{product['id']}/adjust-stock", json={"delta": 0}, headers=auth_headers)
        assert response.status_code == 422

    def test_low_stock(self, client, auth_headers, product):
        client.post("/products/", json={"name": "Oat milk", "price": "3", "quantity_in_stock": 2},
                    headers=auth_headers)

        low = client.get("/products/low-stock", params={"threshold": 5}, headers=auth_headers).json()
        assert [p["name"] for p in low] == ["Oat milk"]

        low = client.get("/products/low-stock", params={"threshold": 12}, headers=auth_headers).json()
        assert [p["name"] for p in low] == ["Oat milk", "Espresso beans 1kg"]
