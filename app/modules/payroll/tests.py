"""
Tests de nómina: empleados, cálculo de pago por periodo y corridas que
registran el gasto en 'Salaries'.
"""

from decimal import Decimal

import pytest

from app.modules.payroll.models import PayType
from app.modules.payroll.service import calculate_pay


def _employee(client, headers, **overrides):
    payload = {
        "name": "Wanjiru Kamau",
        "email": "Wanjiru@Acme.co",
        "pay_rate": "65000.00",
        "pay_type": "Salary",
    }
    payload.update(overrides)
    return client.post("/payroll/employees", json=payload, headers=headers)


class TestCalculatePay:

    def test_salary_is_split_in_26_periods(self):
        assert calculate_pay(Decimal("65000"), PayType.SALARY) == Decimal("2500.00")

    def test_hourly_pays_80_hours(self):
        assert calculate_pay(Decimal("18.75"), PayType.HOURLY) == Decimal("1500.00")

    def test_result_is_rounded_to_cents(self):
        assert calculate_pay(Decimal("50000"), PayType.SALARY) == Decimal("1923.08")


class TestEmployeeAPI:

    def test_create_employee(self, client, auth_headers):
        response = _employee(client, auth_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "wanjiru@acme.co"
        assert data["status"] == "Active"

    def test_pay_rate_must_be_positive(self, client, auth_headers):
        assert _employee(client, auth_headers, pay_rate="0").status_code == 422

    def test_invalid_pay_type(self, client, auth_headers):
        assert _employee(client, auth_headers, pay_type="Weekly").status_code == 422

    def test_list_and_filter_by_status(self, client, auth_headers):
        _employee(client, auth_headers)
        _employee(client, auth_headers, name="Otieno", email="otieno@acme.co", status="Inactive")

        assert client.get("/payroll/employees", headers=auth_headers).json()["total"] == 2
        active = client.get("/payroll/employees?status=Active", headers=auth_headers).json()
        assert [e["name"] for e in active["employees"]] == ["Wanjiru Kamau"]

    def test_update_employee(self, client, auth_headers):
        employee_id = _employee(client, auth_headers).json()["id"]
        response = client.patch(f"/payroll/employees/{employee_id}",
                                json={"pay_type": "Hourly", "pay_rate": "20.00"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["pay_type"] == "Hourly"

    def test_delete_employee(self, client, auth_headers):
        employee_id = _employee(client, auth_headers).json()["id"]
        assert client.delete(f"/payroll/employees/{employee_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/payroll/employees/{employee_id}", headers=auth_headers).status_code == 404

    def test_employees_are_tenant_scoped(self, client, auth_headers, other_auth_headers):
        employee_id = _employee(client, auth_headers).json()["id"]
        assert client.get(f"/payroll/employees/{employee_id}", headers=other_auth_headers).status_code == 404


class TestPayrollRuns:

    @pytest.fixture
    def staff(self, client, auth_headers):
        _employee(client, auth_headers)
        _employee(client, auth_headers, name="Brian Otieno", email="brian@acme.co",
                  pay_type="Hourly", pay_rate="18.75")
        _employee(client, auth_headers, name="Inactive Person", email="gone@acme.co", status="Inactive")

    def test_preview_does_not_record(self, client, auth_headers, staff):
        preview = client.get("/payroll/preview?run_date=2026-03-15", headers=auth_headers).json()
        assert preview["run_date"] == "2026-03-15"
        assert preview["employee_count"] == 2
        assert Decimal(preview["total_amount"]) == Decimal("4000.00")
        assert client.get("/transactions/", headers=auth_headers).json()["total"] == 0

    def test_run_records_salaries_expense(self, client, auth_headers, staff):
        response = client.post("/payroll/run", json={"run_date": "2026-03-15"}, headers=auth_headers)
        assert response.status_code == 201
        run = response.json()
        assert run["employee_count"] == 2
        assert Decimal(run["total_amount"]) == Decimal("4000.00")
        amounts = {line["employee_name"]: Decimal(line["amount"]) for line in run["lines"]}
        assert amounts == {"Brian Otieno": Decimal("1500.00"), "Wanjiru Kamau": Decimal("2500.00")}

        tx = client.get(f"/transactions/{run['transaction_id']}", headers=auth_headers).json()
        assert tx["account"] == "Salaries"
        assert tx["type"] == "Expense"
        assert Decimal(tx["amount"]) == Decimal("-4000.00")
        assert tx["date"].startswith("2026-03-15")

        accounts = client.get("/accounts/", headers=auth_headers).json()["accounts"]
        assert any(a["name"] == "Salaries" and a["type"] == "Expense" for a in accounts)

    def test_run_without_active_employees(self, client, auth_headers):
        response = client.post("/payroll/run", json={}, headers=auth_headers)
        assert response.status_code == 409

    def test_list_and_get_runs(self, client, auth_headers, staff):
        run_id = client.post("/payroll/run", json={}, headers=auth_headers).json()["id"]
        runs = client.get("/payroll/runs", headers=auth_headers).json()
        assert runs["total"] == 1
        assert client.get(f"/payroll/runs/{run_id}", headers=auth_headers).status_code == 200
