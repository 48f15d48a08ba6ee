"""
Tests para facturas: numeración por tenant, ciclo de vida
Draft -> Sent -> Paid/Overdue/Void e integración con el libro.
"""

from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID

import pytest

from app.modules.invoices.models import Invoice, InvoiceStatus
from app.modules.invoices.service import mark_overdue_invoices
from app.modules.invoices.tasks import mark_overdue_invoices_task


@pytest.fixture
def customer_id(client, auth_headers):
    response = client.post("/customers/", json={"name": "Globex Ltd", "email": "ap@globex.co"}, headers=auth_headers)
    return response.json()["id"]


def _invoice(client, headers, customer_id, **overrides):
    payload = {
        "customer_id": customer_id,
        "issue_date": "2026-03-01",
        "items": [
            {"description": "Consulting hours", "quantity": "10", "unit_price": "150.00"},
            {"description": "Travel", "quantity": "1.5", "unit_price": "33.33"},
        ],
    }
    payload.update(overrides)
    return client.post("/invoices/", json=payload, headers=headers)


class TestInvoiceCreation:

    def test_create_draft_with_totals(self, client, auth_headers, customer_id):
        response = _invoice(client, auth_headers, customer_id)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "Draft"
        assert data["invoice_number"] == "INV-0001"
        assert data["customer_name"] == "Globex Ltd"
        # 1500.00 + round(49.995) = 1550.00
        assert Decimal(data["total_amount"]) == Decimal("1550.00")
        assert len(data["line_items"]) == 2

    def test_due_date_defaults_to_30_days(self, client, auth_headers, customer_id):
        data = _invoice(client, auth_headers, customer_id).json()
        assert data["due_date"] == "2026-03-31"

    def test_due_before_issue_rejected(self, client, auth_headers, customer_id):
        response = _invoice(client, auth_headers, customer_id, due_date="2026-02-01")
        assert response.status_code == 422

    def test_items_required(self, client, auth_headers, customer_id):
        assert _invoice(client, auth_headers, customer_id, items=[]).status_code == 422

    def test_unknown_customer(self, client, auth_headers):
        response = _invoice(client, auth_headers, "00000000-0000-0000-0000-000000000009")
        assert response.status_code == 404

    def test_numbers_are_sequential_per_tenant(self, client, auth_headers, other_auth_headers, customer_id):
        _invoice(client, auth_headers, customer_id)
        second = _invoice(client, auth_headers, customer_id).json()
        assert second["invoice_number"] == "INV-0002"

        other_customer = client.post("/customers/", json={"name": "Initech", "email": "ap@initech.co"},
                                     headers=other_auth_headers).json()["id"]
        other = _invoice(client, other_auth_headers, other_customer).json()
        assert other["invoice_number"] == "INV-0001"

    def test_deleted_draft_number_not_reused(self, client, auth_headers, customer_id):
        first = _invoice(client, auth_headers, customer_id).json()
        assert client.delete(f"/invoices/{first['id']}", headers=auth_headers).status_code == 204
        assert _invoice(client, auth_headers, customer_id).json()["invoice_number"] == "INV-0002"


class TestInvoiceLifecycle:

    def test_update_only_drafts(self, client, auth_headers, customer_id):
        invoice = _invoice(client, auth_headers, customer_id).json()
        response = client.patch(f"/invoices/{invoice['id']}", json={
            "items": [{"description": "Flat fee", "quantity": "1", "unit_price": "99.99"}]
        }, headers=auth_headers)
        assert Decimal(response.json()["total_amount"]) == Decimal("99.99")

        client.post(f"/invoices/{invoice['id']}/send", headers=auth_headers)
        response = client.patch(f"/invoices/{invoice['id']}", json={"notes": "late"}, headers=auth_headers)
        assert response.status_code == 409
        assert client.delete(f"/invoices/{invoice['id']}", headers=auth_headers).status_code == 409

    def test_send_then_mark_paid_records_income(self, client, auth_headers, customer_id):
        invoice = _invoice(client, auth_headers, customer_id).json()

        response = client.post(f"/invoices/{invoice['id']}/send", headers=auth_headers)
        assert response.json()["status"] == "Sent"
        assert response.json()["sent_at"] is not None

        response = client.post(f"/invoices/{invoice['id']}/mark-paid", headers=auth_headers)
        assert response.status_code == 200
        paid = response.json()
        assert paid["status"] == "Paid"
        assert paid["transaction_id"] is not None

        tx = client.get(f"/transactions/{paid['transaction_id']}", headers=auth_headers).json()
        assert tx["account"] == "Sales Revenue"
        assert tx["type"] == "Income"
        assert Decimal(tx["amount"]) == Decimal("1550.00")
        assert tx["description"] == "Payment for invoice INV-0001 - Globex Ltd"

        accounts = client.get("/accounts/", params={"type": "Income"}, headers=auth_headers).json()
        assert [a["name"] for a in accounts["accounts"]] == ["Sales Revenue"]

    def test_draft_cannot_be_paid(self, client, auth_headers, customer_id):
        invoice = _invoice(client, auth_headers, customer_id).json()
        response = client.post(f"/invoices/{invoice['id']}/mark-paid", headers=auth_headers)
        assert response.status_code == 409
        assert client.get("/transactions/", headers=auth_headers).json()["total"] == 0

    def test_paid_cannot_be_voided_or_paid_twice(self, client, auth_headers, customer_id):
        invoice = _invoice(client, auth_headers, customer_id).json()
        client.post(f"/invoices/{invoice['id']}/send", headers=auth_headers)
        client.post(f"/invoices/{invoice['id']}/mark-paid", headers=auth_headers)

        assert client.post(f"/invoices/{invoice['id']}/mark-paid", headers=auth_headers).status_code == 409
        assert client.post(f"/invoices/{invoice['id']}/void", headers=auth_headers).status_code == 409
        assert client.get("/transactions/", headers=auth_headers).json()["total"] == 1

    def test_void_sent_invoice(self, client, auth_headers, customer_id):
        invoice = _invoice(client, auth_headers, customer_id).json()
        client.post(f"/invoices/{invoice['id']}/send", headers=auth_headers)
        response = client.post(f"/invoices/{invoice['id']}/void", headers=auth_headers)
        assert response.json()["status"] == "Void"

    def test_list_filters_and_summary(self, client, auth_headers, customer_id):
        first = _invoice(client, auth_headers, customer_id).json()
        _invoice(client, auth_headers, customer_id, issue_date="2026-04-01")
        client.post(f"/invoices/{first['id']}/send", headers=auth_headers)

        listing = client.get("/invoices/", params={"status": "Sent"}, headers=auth_headers).json()
        assert [i["id"] for i in listing["invoices"]] == [first["id"]]

        listing = client.get("/invoices/", params={"start_date": "2026-03-15"}, headers=auth_headers).json()
        assert listing["total"] == 1

        summary = client.get("/invoices/summary", headers=auth_headers).json()
        assert summary["total_invoices"] == 2
        assert summary["by_status"]["Draft"]["count"] == 1
        assert Decimal(summary["outstanding_amount"]) == Decimal("1550.00")
        assert Decimal(summary["paid_amount"]) == Decimal("0")


class TestOverdueInvoices:

    def test_mark_overdue_only_sent_past_due(self, client, auth_headers, customer_id, db_session):
        sent = _invoice(client, auth_headers, customer_id, due_date="2026-03-10").json()
        _invoice(client, auth_headers, customer_id, due_date="2026-03-10")  # Draft, no cambia
        client.post(f"/invoices/{sent['id']}/send", headers=auth_headers)

        assert mark_overdue_invoices(db_session, today=date(2026, 3, 10)) == 0
        assert mark_overdue_invoices(db_session, today=date(2026, 3, 11)) == 1

        data = client.get(f"/invoices/{sent['id']}", headers=auth_headers).json()
        assert data["status"] == "Overdue"

        # Las vencidas todavía se pueden cobrar
        response = client.post(f"/invoices/{sent['id']}/mark-paid", headers=auth_headers)
        assert response.json()["status"] == "Paid"

    def test_periodic_task(self, client, auth_headers, customer_id, db_session):
        past = date.today() - timedelta(days=40)
        invoice = _invoice(client, auth_headers, customer_id, issue_date=past.isoformat(),
                           due_date=(past + timedelta(days=5)).isoformat()).json()
        client.post(f"/invoices/{invoice['id']}/send", headers=auth_headers)

        assert mark_overdue_invoices_task() == 1
        stored = db_session.query(Invoice).filter(Invoice.id == UUID(invoice["id"])).one()
        assert stored.status == InvoiceStatus.OVERDUE
