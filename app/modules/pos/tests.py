"""
Tests del POS: sesiones de caja y ventas atómicas que descuentan stock
y registran el ingreso en 'Sales Revenue'.
"""

from decimal import Decimal

import pytest

from app.modules.pos.schemas import CartItem
from app.modules.pos.services import merge_cart


def _product(client, headers, name, price, stock):
    response = client.post("/products/", json={"name": name, "price": price, "quantity_in_stock": stock},
                           headers=headers)
    return response.json()["id"]


@pytest.fixture
def catalog(client, auth_headers):
    return {
        "beans": _product(client, auth_headers, "Espresso beans", "24.50", 10),
        "milk": _product(client, auth_headers, "Oat milk", "3.00", 1),
    }


class TestMergeCart:

    def test_repeated_lines_are_grouped(self):
        items = [
            CartItem(product_id="00000000-0000-0000-0000-000000000001", quantity=1),
            CartItem(product_id="00000000-0000-0000-0000-000000000002", quantity=2),
            CartItem(product_id="00000000-0000-0000-0000-000000000001", quantity=3),
        ]
        merged = merge_cart(items)
        assert list(merged.values()) == [4, 2]


class TestPosSessions:

    def test_open_and_close_session(self, client, auth_headers):
        assert client.get("/pos/sessions/current", headers=auth_headers).json() is None

        response = client.post("/pos/sessions/open", json={"opening_notes": "Morning shift"}, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["status"] == "open"

        current = client.get("/pos/sessions/current", headers=auth_headers).json()
        assert current["id"] == response.json()["id"]

        response = client.post("/pos/sessions/close", json={"closing_notes": "All good"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "closed"
        assert response.json()["closed_at"] is not None

    def test_only_one_open_session(self, client, auth_headers):
        client.post("/pos/sessions/open", json={}, headers=auth_headers)
        assert client.post("/pos/sessions/open", json={}, headers=auth_headers).status_code == 409

    def test_close_without_open_session(self, client, auth_headers):
        assert client.post("/pos/sessions/close", json={}, headers=auth_headers).status_code == 409

    def test_list_sessions(self, client, auth_headers):
        client.post("/pos/sessions/open", json={}, headers=auth_headers)
        client.post("/pos/sessions/close", json={}, headers=auth_headers)
        client.post("/pos/sessions/open", json={}, headers=auth_headers)
        assert client.get("/pos/sessions", headers=auth_headers).json()["total"] == 2


class TestPosSales:

    def test_sale_updates_stock_and_ledger(self, client, auth_headers, catalog):
        session_id = client.post("/pos/sessions/open", json={}, headers=auth_headers).json()["id"]

        response = client.post("/pos/sales", json={"items": [
            {"product_id": catalog["beans"], "quantity": 1},
            {"product_id": catalog["milk"], "quantity": 1},
            {"product_id": catalog["beans"], "quantity": 1},
        ]}, headers=auth_headers)
        assert response.status_code == 201
        sale = response.json()

        assert sale["session_id"] == session_id
        assert len(sale["line_items"]) == 2
        assert Decimal(sale["subtotal"]) == Decimal("52.00")
        assert Decimal(sale["tax"]) == Decimal("3.64")
        assert Decimal(sale["total"]) == Decimal("55.64")

        beans = client.get(f"/products/{catalog['beans']}", headers=auth_headers).json()
        assert beans["quantity_in_stock"] == 8
        movements = client.get(f"/products/{catalog['beans']}/movements", headers=auth_headers).json()
        sale_movements = [m for m in movements if m["movement_type"] == "SALE"]
        assert sale_movements[0]["quantity"] == -2
        assert sale_movements[0]["reference"] == f"SALE-{sale['id']}"

        tx = client.get(f"/transactions/{sale['transaction_id']}", headers=auth_headers).json()
        assert tx["account"] == "Sales Revenue"
        assert Decimal(tx["amount"]) == Decimal("55.64")
        assert tx["description"].startswith("POS Sale - ")

    def test_sale_without_session_is_allowed(self, client, auth_headers, catalog):
        response = client.post("/pos/sales", json={"items": [{"product_id": catalog["beans"], "quantity": 1}]},
                               headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["session_id"] is None

    def test_insufficient_stock_changes_nothing(self, client, auth_headers, catalog):
        response = client.post("/pos/sales", json={"items": [
            {"product_id": catalog["beans"], "quantity": 2},
            {"product_id": catalog["milk"], "quantity": 2},
        ]}, headers=auth_headers)
        assert response.status_code == 409

        beans = client.get(f"/products/{catalog['beans']}", headers=auth_headers).json()
        assert beans["quantity_in_stock"] == 10
        assert client.get("/transactions/", headers=auth_headers).json()["total"] == 0
        assert client.get("/pos/sales", headers=auth_headers).json()["total"] == 0

    def test_unknown_product(self, client, auth_headers, other_auth_headers, catalog):
        # Un producto de otro tenant no existe para este
        response = client.post("/pos/sales", json={"items": [{"product_id": catalog["beans"], "quantity": 1}]},
                               headers=other_auth_headers)
        assert response.status_code == 404

    def test_empty_cart_rejected(self, client, auth_headers):
        assert client.post("/pos/sales", json={"items": []}, headers=auth_headers).status_code == 422

    def test_list_and_get_sales(self, client, auth_headers, catalog):
        sale = client.post("/pos/sales", json={"items": [{"product_id": catalog["beans"], "quantity": 1}]},
                           headers=auth_headers).json()

        listing = client.get("/pos/sales", headers=auth_headers).json()
        assert listing["total"] == 1
        response = client.get(f"/pos/sales/{sale['id']}", headers=auth_headers)
        assert response.json()["line_items"][0]["name"] == "Espresso beans"
