"""
Tests para el libro de transacciones: signo según el tipo, filtros,
vínculos con proyectos/cuentas bancarias y flujos de IA simulados.
"""

import base64
from decimal import Decimal

import pytest

from app.modules.assistant.client import AIServiceError
from app.modules.transactions.models import TransactionType, signed_amount


def _tx(client, headers, **overrides):
    payload = {
        "date": "2026-03-10T12:00:00Z",
        "description": "Office rent",
        "amount": "1200.00",
        "type": "Expense",
        "account": "Rent",
    }
    payload.update(overrides)
    return client.post("/transactions/", json=payload, headers=headers)


class TestSignedAmount:

    def test_income_is_positive_and_expense_negative(self):
        assert signed_amount(Decimal("-50"), TransactionType.INCOME) == Decimal("50")
        assert signed_amount(Decimal("50"), TransactionType.EXPENSE) == Decimal("-50")
        assert signed_amount(Decimal("-50"), TransactionType.EXPENSE) == Decimal("-50")


class TestTransactionAPI:

    def test_requires_authentication(self, client):
        assert client.get("/transactions/").status_code in (401, 403)

    def test_expense_stored_negative(self, client, auth_headers):
        response = _tx(client, auth_headers)
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["amount"]) == Decimal("-1200.00")
        assert data["type"] == "Expense"

    def test_income_stored_positive_even_if_negative_input(self, client, auth_headers):
        response = _tx(client, auth_headers, amount="-300", type="Income", account="Consulting")
        assert Decimal(response.json()["amount"]) == Decimal("300.00")

    def test_zero_amount_rejected(self, client, auth_headers):
        assert _tx(client, auth_headers, amount="0").status_code == 422

    def test_blank_account_becomes_uncategorized(self, client, auth_headers):
        response = _tx(client, auth_headers, account="   ")
        assert response.json()["account"] == "Uncategorized"

    def test_unknown_project_is_404(self, client, auth_headers):
        response = _tx(client, auth_headers, project_id="00000000-0000-0000-0000-000000000001")
        assert response.status_code == 404

    def test_list_newest_first_with_filters(self, client, auth_headers):
        _tx(client, auth_headers, date="2026-03-01T09:00:00Z", description="Old rent")
        _tx(client, auth_headers, date="2026-03-20T09:00:00Z", description="Consulting gig",
            amount="800", type="Income", account="Consulting", vendor_name="Globex")
        _tx(client, auth_headers, date="2026-03-15T09:00:00Z", description="Power bill", account="Utilities")

        data = client.get("/transactions/", headers=auth_headers).json()
        assert data["total"] == 3
        assert [t["description"] for t in data["transactions"]] == ["Consulting gig", "Power bill", "Old rent"]

        data = client.get("/transactions/", params={"type": "Income"}, headers=auth_headers).json()
        assert data["total"] == 1

        data = client.get("/transactions/", params={"search": "globex"}, headers=auth_headers).json()
        assert data["transactions"][0]["description"] == "Consulting gig"

        data = client.get("/transactions/", params={
            "start_date": "2026-03-10T00:00:00Z", "end_date": "2026-03-16T00:00:00Z"
        }, headers=auth_headers).json()
        assert [t["description"] for t in data["transactions"]] == ["Power bill"]

        data = client.get("/transactions/", params={"account": "Utilities"}, headers=auth_headers).json()
        assert data["total"] == 1

    def test_pagination(self, client, auth_headers):
        for day in range(1, 6):
            _tx(client, auth_headers, date=f"2026-03-0{day}T09:00:00Z", description=f"Tx {day}")
        data = client.get("/transactions/", params={"limit": 2, "offset": 2}, headers=auth_headers).json()
        assert data["total"] == 5
        assert [t["description"] for t in data["transactions"]] == ["Tx 3", "Tx 2"]

    def test_update_reapplies_sign(self, client, auth_headers):
        tx_id = _tx(client, auth_headers).json()["id"]
        response = client.patch(f"/transactions/{tx_id}", json={"type": "Income"}, headers=auth_headers)
        assert response.status_code == 200
        assert Decimal(response.json()["amount"]) == Decimal("1200.00")

        response = client.patch(f"/transactions/{tx_id}", json={"amount": "10.50"}, headers=auth_headers)
        assert Decimal(response.json()["amount"]) == Decimal("10.50")

    def test_update_account_only(self, client, auth_headers):
        tx_id = _tx(client, auth_headers, account="Uncategorized").json()["id"]
        response = client.patch(f"/transactions/{tx_id}/account", json={"account": "Rent"}, headers=auth_headers)
        assert response.json()["account"] == "Rent"

    def test_delete_transaction(self, client, auth_headers):
        tx_id = _tx(client, auth_headers).json()["id"]
        assert client.delete(f"/transactions/{tx_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/transactions/{tx_id}", headers=auth_headers).status_code == 404

    def test_delete_sale_transaction_conflicts(self, client, auth_headers):
        product = client.post("/products/", json={"name": "Beans", "price": "24.50", "quantity_in_stock": 5},
                              headers=auth_headers).json()
        sale = client.post("/pos/sales", json={"items": [{"product_id": product["id"], "quantity": 1}]},
                           headers=auth_headers).json()
        tx_id = sale["transaction_id"]

        response = client.delete(f"/transactions/{tx_id}", headers=auth_headers)
        assert response.status_code == 409
        assert "venta POS" in response.json()["detail"]
        assert client.get(f"/transactions/{tx_id}", headers=auth_headers).status_code == 200

    def test_tenant_isolation(self, client, auth_headers, other_auth_headers):
        tx_id = _tx(client, auth_headers).json()["id"]
        assert client.get(f"/transactions/{tx_id}", headers=other_auth_headers).status_code == 404
        assert client.delete(f"/transactions/{tx_id}", headers=other_auth_headers).status_code == 404


class TestTransactionAI:
    """Flujos de IA con un cliente simulado"""

    def test_ai_not_configured_returns_503(self, client, auth_headers):
        tx_id = _tx(client, auth_headers).json()["id"]
        response = client.post(f"/transactions/{tx_id}/categorize", headers=auth_headers)
        assert response.status_code == 503

    def test_categorize_suggests_without_applying(self, client, auth_headers, fake_ai):
        _tx(client, auth_headers, description="Electricity March", account="Utilities")
        tx_id = _tx(client, auth_headers, description="Electricity April", account="Uncategorized").json()["id"]
        fake_ai.json_responses.append({"category": "Utilities", "confidence": 0.93})

        response = client.post(f"/transactions/{tx_id}/categorize", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["category"] == "Utilities"
        assert response.json()["applied"] is False
        assert "Description: Electricity March, Category: Utilities" in fake_ai.calls[0]["content"]
        assert client.get(f"/transactions/{tx_id}", headers=auth_headers).json()["account"] == "Uncategorized"

    def test_categorize_apply_saves_account(self, client, auth_headers, fake_ai):
        tx_id = _tx(client, auth_headers, account="Uncategorized").json()["id"]
        fake_ai.json_responses.append({"category": "Rent", "confidence": 7})

        response = client.post(f"/transactions/{tx_id}/categorize", params={"apply": True}, headers=auth_headers)
        assert response.json()["confidence"] == 1.0
        assert client.get(f"/transactions/{tx_id}", headers=auth_headers).json()["account"] == "Rent"

    def test_categorize_provider_error_is_502(self, client, auth_headers, fake_ai):
        tx_id = _tx(client, auth_headers).json()["id"]
        fake_ai.json_responses.append(AIServiceError())
        response = client.post(f"/transactions/{tx_id}/categorize", headers=auth_headers)
        assert response.status_code == 502

    def test_analyze_receipt_from_upload(self, client, auth_headers, fake_ai):
        fake_ai.json_responses.append({
            "vendorName": "Java House",
            "transactionDate": "2026-03-02",
            "description": "Coffee and pastries",
            "totalAmount": 12.5,
        })
        response = client.post(
            "/transactions/analyze-receipt",
            files={"file": ("receipt.png", b"\x89PNG fake", "image/png")},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["vendorName"] == "Java House"
        assert fake_ai.calls[0]["model"] == "fake-vision"
        image_part = fake_ai.calls[0]["content"][1]["image_url"]["url"]
        assert image_part == "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode()

    def test_analyze_receipt_rejects_non_image(self, client, auth_headers, fake_ai):
        response = client.post(
            "/transactions/analyze-receipt",
            data={"image": "data:text/plain;base64,aGVsbG8="},
            headers=auth_headers
        )
        assert response.status_code == 400

    def test_analyze_receipt_requires_image(self, client, auth_headers, fake_ai):
        response = client.post("/transactions/analyze-receipt", data={}, headers=auth_headers)
        assert response.status_code == 400

    def test_analyze_receipt_invalid_model_output_is_502(self, client, auth_headers, fake_ai):
        fake_ai.json_responses.append({"vendorName": "X"})
        response = client.post(
            "/transactions/analyze-receipt",
            data={"image": "data:image/jpeg;base64,/9j/4AAQ"},
            headers=auth_headers
        )
        assert response.status_code == 502
