"""
Tests para el plan de cuentas: CRUD, nombres únicos por tenant,
cuentas por defecto y protección de cuentas en uso.
"""

import pytest

from app.modules.accounts.models import AccountType, DEFAULT_CHART_OF_ACCOUNTS
from app.modules.accounts.service import AccountService
from app.modules.transactions.models import Transaction


def _create(client, headers, name="Rent", type_="Expense", description=None):
    return client.post("/accounts/", json={"name": name, "type": type_, "description": description}, headers=headers)


class TestAccountAPI:
    """Tests de endpoints del plan de cuentas"""

    def test_requires_authentication(self, client):
        response = client.get("/accounts/")
        assert response.status_code in (401, 403)

    def test_create_and_get_account(self, client, auth_headers):
        response = _create(client, auth_headers, "Consulting", "Income", "Servicios")
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Consulting"
        assert data["type"] == "Income"

        response = client.get(f"/accounts/{data['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["description"] == "Servicios"

    def test_duplicate_name_is_case_insensitive(self, client, auth_headers):
        assert _create(client, auth_headers, "Rent").status_code == 201
        response = _create(client, auth_headers, "  rent ")
        assert response.status_code == 409

    def test_blank_name_rejected(self, client, auth_headers):
        response = _create(client, auth_headers, "   ")
        assert response.status_code == 422

    def test_list_ordered_by_type_then_name(self, client, auth_headers):
        _create(client, auth_headers, "Utilities", "Expense")
        _create(client, auth_headers, "Cash", "Asset")
        _create(client, auth_headers, "Bank Fees", "Expense")

        response = client.get("/accounts/", headers=auth_headers)
        names = [a["name"] for a in response.json()["accounts"]]
        assert names == ["Cash", "Bank Fees", "Utilities"]

        response = client.get("/accounts/", params={"type": "Expense"}, headers=auth_headers)
        assert response.json()["total"] == 2

    def test_accounts_are_tenant_scoped(self, client, auth_headers, other_auth_headers):
        account_id = _create(client, auth_headers, "Rent").json()["id"]

        assert client.get(f"/accounts/{account_id}", headers=other_auth_headers).status_code == 404
        assert client.get("/accounts/", headers=other_auth_headers).json()["total"] == 0
        # El otro tenant puede usar el mismo nombre
        assert _create(client, other_auth_headers, "Rent").status_code == 201

    def test_seed_defaults_skips_existing(self, client, auth_headers):
        _create(client, auth_headers, "rent")

        response = client.post("/accounts/seed-defaults", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"created": len(DEFAULT_CHART_OF_ACCOUNTS) - 1, "skipped": 1}

        response = client.post("/accounts/seed-defaults", headers=auth_headers)
        assert response.json()["created"] == 0

    def test_rename_updates_transactions(self, client, auth_headers):
        account_id = _create(client, auth_headers, "Software").json()["id"]
        client.post("/transactions/", json={
            "description": "IDE license", "amount": "99.00", "type": "Expense", "account": "Software"
        }, headers=auth_headers)

        response = client.patch(f"/accounts/{account_id}", json={"name": "SaaS"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "SaaS"

        transactions = client.get("/transactions/", headers=auth_headers).json()["transactions"]
        assert transactions[0]["account"] == "SaaS"

    def test_account_matching_ignores_case(self, client, auth_headers):
        account_id = _create(client, auth_headers, "Rent").json()["id"]
        client.post("/transactions/", json={
            "description": "Shop rent", "amount": "300", "type": "Expense", "account": "rent"
        }, headers=auth_headers)

        assert client.delete(f"/accounts/{account_id}", headers=auth_headers).status_code == 409

        client.patch(f"/accounts/{account_id}", json={"name": "Lease"}, headers=auth_headers)
        transactions = client.get("/transactions/", headers=auth_headers).json()["transactions"]
        assert transactions[0]["account"] == "Lease"

    def test_delete_account_in_use_conflicts(self, client, auth_headers):
        account_id = _create(client, auth_headers, "Marketing").json()["id"]
        client.post("/transactions/", json={
            "description": "Flyers", "amount": "40", "type": "Expense", "account": "Marketing"
        }, headers=auth_headers)

        assert client.delete(f"/accounts/{account_id}", headers=auth_headers).status_code == 409

    def test_delete_unused_account(self, client, auth_headers):
        account_id = _create(client, auth_headers, "Transport").json()["id"]
        assert client.delete(f"/accounts/{account_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/accounts/{account_id}", headers=auth_headers).status_code == 404


class TestAccountService:

    def test_ensure_account_creates_once(self, db_session, sample_user):
        service = AccountService(db_session)
        first = service.ensure_account("Sales Revenue", AccountType.INCOME, sample_user.id)
        db_session.commit()
        second = service.ensure_account("sales revenue", AccountType.INCOME, sample_user.id)
        assert first.id == second.id
