"""
Tests para proyectos: CRUD, estados y rentabilidad contra presupuesto.
"""

from decimal import Decimal

from app.modules.projects.service import compute_profitability


class TestProfitability:

    def test_revenue_expenses_and_budget(self):
        result = compute_profitability([Decimal("1000"), Decimal("-250"), Decimal("-150")], Decimal("800"))
        assert result.revenue == Decimal("1000.00")
        assert result.expenses == Decimal("400.00")
        assert result.profit == Decimal("600.00")
        assert result.budget_used == Decimal("400.00")
        assert result.budget_remaining == Decimal("400.00")
        assert result.budget_used_percent == 50.0

    def test_without_budget(self):
        result = compute_profitability([Decimal("-10")], None)
        assert result.profit == Decimal("-10.00")
        assert result.budget_remaining is None
        assert result.budget_used_percent is None

    def test_zero_budget_has_no_percent(self):
        result = compute_profitability([Decimal("-10")], Decimal("0"))
        assert result.budget_remaining == Decimal("-10.00")
        assert result.budget_used_percent is None


class TestProjectAPI:

    def test_create_defaults_to_not_started(self, client, auth_headers):
        response = client.post("/projects/", json={"name": "Website revamp", "budget": "5000"}, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["status"] == "Not Started"

    def test_detail_includes_transactions_and_profitability(self, client, auth_headers):
        project_id = client.post("/projects/", json={"name": "Fit-out", "budget": "1000"},
                                 headers=auth_headers).json()["id"]
        client.post("/transactions/", json={
            "description": "Deposit", "amount": "1500", "type": "Income", "project_id": project_id
        }, headers=auth_headers)
        client.post("/transactions/", json={
            "description": "Materials", "amount": "600", "type": "Expense", "project_id": project_id
        }, headers=auth_headers)

        detail = client.get(f"/projects/{project_id}", headers=auth_headers).json()
        assert len(detail["transactions"]) == 2
        assert Decimal(detail["profitability"]["profit"]) == Decimal("900.00")
        assert Decimal(detail["profitability"]["budget_remaining"]) == Decimal("400.00")
        assert detail["profitability"]["budget_used_percent"] == 60.0

    def test_filter_by_status(self, client, auth_headers):
        project_id = client.post("/projects/", json={"name": "A"}, headers=auth_headers).json()["id"]
        client.post("/projects/", json={"name": "B"}, headers=auth_headers)
        client.patch(f"/projects/{project_id}", json={"status": "In Progress"}, headers=auth_headers)

        listing = client.get("/projects/", params={"status": "In Progress"}, headers=auth_headers).json()
        assert listing["total"] == 1
        assert listing["projects"][0]["name"] == "A"

    def test_invalid_status_rejected(self, client, auth_headers):
        response = client.post("/projects/", json={"name": "X", "status": "Finished"}, headers=auth_headers)
        assert response.status_code == 422

    def test_soft_delete(self, client, auth_headers):
        project_id = client.post("/projects/", json={"name": "Old"}, headers=auth_headers).json()["id"]
        assert client.delete(f"/projects/{project_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/projects/{project_id}", headers=auth_headers).status_code == 404
