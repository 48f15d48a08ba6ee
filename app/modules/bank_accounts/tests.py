"""
Tests para cuentas bancarias: CRUD, soft delete y saldo calculado
desde las transacciones vinculadas.
"""

from decimal import Decimal


def _create(client, headers, name="Main checking"):
    return client.post("/bank-accounts/", json={
        "account_name": name, "account_number": "0012345678", "bank_name": "KCB"
    }, headers=headers)


class TestBankAccountAPI:

    def test_create_list_and_update(self, client, auth_headers):
        response = _create(client, auth_headers)
        assert response.status_code == 201
        bank_id = response.json()["id"]

        listing = client.get("/bank-accounts/", headers=auth_headers).json()
        assert listing["total"] == 1

        response = client.patch(f"/bank-accounts/{bank_id}", json={"bank_name": "Equity Bank"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["bank_name"] == "Equity Bank"
        assert response.json()["account_name"] == "Main checking"

    def test_balance_sums_signed_transactions(self, client, auth_headers):
        bank_id = _create(client, auth_headers).json()["id"]
        for amount, tx_type in (("500", "Income"), ("120.25", "Expense"), ("30", "Expense")):
            client.post("/transactions/", json={
                "description": f"{tx_type} {amount}", "amount": amount, "type": tx_type,
                "bank_account_id": bank_id
            }, headers=auth_headers)
        # Sin cuenta bancaria: no cuenta para el saldo
        client.post("/transactions/", json={"description": "Cash sale", "amount": "999", "type": "Income"},
                    headers=auth_headers)

        balance = client.get(f"/bank-accounts/{bank_id}/balance", headers=auth_headers).json()
        assert Decimal(balance["balance"]) == Decimal("349.75")
        assert balance["transaction_count"] == 3

    def test_soft_delete_hides_account(self, client, auth_headers):
        bank_id = _create(client, auth_headers).json()["id"]
        assert client.delete(f"/bank-accounts/{bank_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/bank-accounts/{bank_id}", headers=auth_headers).status_code == 404
        assert client.get("/bank-accounts/", headers=auth_headers).json()["total"] == 0

    def test_other_tenant_cannot_link_transactions(self, client, auth_headers, other_auth_headers):
        bank_id = _create(client, auth_headers).json()["id"]
        response = client.post("/transactions/", json={
            "description": "Sneaky", "amount": "10", "type": "Income", "bank_account_id": bank_id
        }, headers=other_auth_headers)
        assert response.status_code == 404
