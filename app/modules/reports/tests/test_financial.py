"""
Tests de reportes financieros: dashboard, gráfico del mes y estados.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.modules.reports.services.financial import FinancialReportService
from app.modules.reports.utils import month_bounds, previous_month_bounds


LEDGER = [
    ("2026-02-10T10:00:00Z", "Retainer", "1000.00", "Income", "Consulting"),
    ("2026-02-12T10:00:00Z", "February rent", "400.00", "Expense", "Rent"),
    ("2026-03-05T10:00:00Z", "Counter sales", "1500.00", "Income", "Sales Revenue"),
    ("2026-03-06T10:00:00Z", "Workshop", "500.00", "Income", "Consulting"),
    ("2026-03-07T10:00:00Z", "March rent", "300.00", "Expense", "Rent"),
    ("2026-03-08T10:00:00Z", "Power bill", "200.00", "Expense", "Utilities"),
]


@pytest.fixture
def ledger(client, auth_headers):
    for tx_date, description, amount, tx_type, account in LEDGER:
        response = client.post("/transactions/", json={
            "date": tx_date,
            "description": description,
            "amount": amount,
            "type": tx_type,
            "account": account,
        }, headers=auth_headers)
        assert response.status_code == 201


def _service(db_session, user):
    return FinancialReportService(db_session, user.id)


class TestMonthBounds:

    def test_month_bounds(self):
        assert month_bounds(date(2024, 2, 14)) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_previous_month_crosses_year(self):
        assert previous_month_bounds(date(2026, 1, 5)) == (date(2025, 12, 1), date(2025, 12, 31))


class TestDashboard:

    def test_metrics_compare_with_previous_month(self, db_session, sample_user, ledger):
        dashboard = _service(db_session, sample_user).get_dashboard(today=date(2026, 3, 20))

        assert dashboard["period_start"] == date(2026, 3, 1)
        assert dashboard["total_revenue"]["value"] == Decimal("2000.00")
        assert dashboard["total_revenue"]["previous"] == Decimal("1000.00")
        assert dashboard["total_revenue"]["change_percent"] == 100.0
        assert dashboard["total_expenses"]["value"] == Decimal("500.00")
        assert dashboard["total_expenses"]["change_percent"] == 25.0
        assert dashboard["net_income"]["value"] == Decimal("1500.00")
        assert dashboard["net_income"]["change_percent"] == 150.0
        assert dashboard["cash_flow"]["value"] == Decimal("1500.00")
        assert dashboard["transaction_count"] == 4

    def test_change_is_none_without_previous_data(self, db_session, sample_user, ledger):
        dashboard = _service(db_session, sample_user).get_dashboard(today=date(2026, 2, 15))
        assert dashboard["total_revenue"]["change_percent"] is None

    def test_recent_transactions_newest_first(self, db_session, sample_user, ledger):
        dashboard = _service(db_session, sample_user).get_dashboard(today=date(2026, 3, 20))
        descriptions = [t.description for t in dashboard["recent_transactions"]]
        assert descriptions[0] == "Power bill"
        assert len(descriptions) == len(LEDGER)

    def test_dashboard_endpoint(self, client, auth_headers):
        response = client.get("/reports/dashboard", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total_revenue"]["value"]) == Decimal("0")
        assert data["recent_transactions"] == []

    def test_requires_auth(self, client):
        assert client.get("/reports/dashboard").status_code in (401, 403)


class TestOverviewChart:

    def test_one_point_per_day(self, db_session, sample_user, ledger):
        chart = _service(db_session, sample_user).get_overview_chart(today=date(2026, 3, 20))
        assert len(chart["points"]) == 31

        by_day = {p["date"]: p for p in chart["points"]}
        assert by_day[date(2026, 3, 5)]["income"] == Decimal("1500.00")
        assert by_day[date(2026, 3, 7)]["expenses"] == Decimal("300.00")
        assert by_day[date(2026, 3, 7)]["net"] == Decimal("-300.00")
        assert by_day[date(2026, 3, 1)]["net"] == Decimal("0.00")

    def test_aware_timestamps_are_bucketed_by_utc_day(self, db_session, sample_user, monkeypatch):
        # psycopg2 devuelve timestamptz en la zona horaria de la sesión
        new_york = timezone(timedelta(hours=-4))
        rows = [
            (datetime(2026, 9, 30, 20, 30, tzinfo=new_york), Decimal("100.00")),
            (datetime(2026, 10, 15, 22, 0, tzinfo=new_york), Decimal("-40.00")),
        ]

        class _Rows:
            def all(self):
                return rows

        service = _service(db_session, sample_user)
        monkeypatch.setattr(service, "_apply_date_filter", lambda *args: _Rows())
        chart = service.get_overview_chart(today=date(2026, 10, 19))

        by_day = {p["date"]: p for p in chart["points"]}
        assert by_day[date(2026, 10, 1)]["income"] == Decimal("100.00")
        assert by_day[date(2026, 10, 16)]["expenses"] == Decimal("40.00")
        assert by_day[date(2026, 10, 15)]["expenses"] == Decimal("0.00")

    def test_default_month_is_utc(self, db_session, sample_user, monkeypatch):
        from app.modules.reports.services import financial

        monkeypatch.setattr(financial, "utcnow", lambda: datetime(2026, 11, 1, 1, 0, tzinfo=timezone.utc))
        chart = _service(db_session, sample_user).get_overview_chart()
        assert chart["period_start"] == date(2026, 11, 1)
        assert len(chart["points"]) == 30


class TestIncomeStatement:

    def test_breakdown_by_account(self, client, auth_headers, ledger):
        response = client.get("/reports/income-statement?start_date=2026-03-01&end_date=2026-03-31",
                              headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total_revenue"]) == Decimal("2000.00")
        assert Decimal(data["total_expenses"]) == Decimal("500.00")
        assert Decimal(data["net_income"]) == Decimal("1500.00")
        assert [a["account"] for a in data["revenue_by_account"]] == ["Sales Revenue", "Consulting"]
        assert [a["account"] for a in data["expenses_by_account"]] == ["Rent", "Utilities"]

    def test_without_range_uses_all_history(self, client, auth_headers, ledger):
        data = client.get("/reports/income-statement", headers=auth_headers).json()
        assert Decimal(data["total_revenue"]) == Decimal("3000.00")
        consulting = next(a for a in data["revenue_by_account"] if a["account"] == "Consulting")
        assert Decimal(consulting["amount"]) == Decimal("1500.00")

    def test_csv_export(self, client, auth_headers, ledger):
        response = client.get(
            "/reports/income-statement?start_date=2026-03-01&end_date=2026-03-31&export=csv",
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "income_statement_2026-03-01_2026-03-31.csv" in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert lines[0] == "Section,Account,Amount"
        assert "Revenue,Sales Revenue,1500.00" in lines
        assert "Total,Net Income,1500.00" in lines

    def test_invalid_range(self, client, auth_headers):
        response = client.get("/reports/income-statement?start_date=2026-03-31&end_date=2026-03-01",
                              headers=auth_headers)
        assert response.status_code == 422

    def test_other_tenant_sees_nothing(self, client, other_auth_headers, ledger):
        data = client.get("/reports/income-statement", headers=other_auth_headers).json()
        assert Decimal(data["total_revenue"]) == Decimal("0")
        assert data["revenue_by_account"] == []


class TestBalanceSheetAndCashFlow:

    def test_balance_sheet_as_of_date(self, client, auth_headers, ledger):
        february = client.get("/reports/balance-sheet?as_of_date=2026-02-28", headers=auth_headers).json()
        assert Decimal(february["assets_cash"]) == Decimal("600.00")
        assert Decimal(february["total_liabilities"]) == Decimal("0")

        march = client.get("/reports/balance-sheet?as_of_date=2026-03-31", headers=auth_headers).json()
        assert Decimal(march["total_assets"]) == Decimal("2100.00")
        assert Decimal(march["equity"]) == Decimal("2100.00")

    def test_cash_flow(self, client, auth_headers, ledger):
        data = client.get("/reports/cash-flow?start_date=2026-03-01&end_date=2026-03-31",
                          headers=auth_headers).json()
        assert Decimal(data["opening_cash"]) == Decimal("600.00")
        assert Decimal(data["operating_activities"]) == Decimal("1500.00")
        assert Decimal(data["investing_activities"]) == Decimal("0")
        assert Decimal(data["net_change_in_cash"]) == Decimal("1500.00")
        assert Decimal(data["closing_cash"]) == Decimal("2100.00")
