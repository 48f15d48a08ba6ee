"""
Tests de reportes X/Z del POS, historial de reportes guardados y la
tarea programada de cierre del día.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.common.utils import utcnow
from app.modules.reports.models import SavedReport
from app.modules.reports.tasks import generate_end_of_day_reports


@pytest.fixture
def product_id(client, auth_headers):
    response = client.post("/products/", json={"name": "Espresso beans", "price": "24.50", "quantity_in_stock": 50},
                           headers=auth_headers)
    return response.json()["id"]


def _sell(client, headers, product_id, quantity=1):
    response = client.post("/pos/sales", json={"items": [{"product_id": product_id, "quantity": quantity}]},
                           headers=headers)
    assert response.status_code == 201
    return response.json()


class TestZReport:

    def test_summarizes_todays_sales(self, client, auth_headers, product_id):
        _sell(client, auth_headers, product_id, 2)
        _sell(client, auth_headers, product_id, 1)

        response = client.get("/reports/pos/z-report", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["report_date"] == utcnow().date().isoformat()
        summary = data["summary"]
        assert summary["total_transactions"] == 2
        assert summary["items_sold"] == 3
        assert Decimal(summary["total_sales"]) == Decimal("78.65")
        assert Decimal(summary["total_tax"]) == Decimal("5.15")

    def test_other_day_is_empty(self, client, auth_headers, product_id):
        _sell(client, auth_headers, product_id)
        summary = client.get("/reports/pos/z-report?report_date=2020-01-01", headers=auth_headers).json()["summary"]
        assert summary["total_transactions"] == 0
        assert Decimal(summary["total_sales"]) == Decimal("0")


class TestXReport:

    def test_requires_open_session_or_since(self, client, auth_headers):
        assert client.get("/reports/pos/x-report", headers=auth_headers).status_code == 409

    def test_only_sales_of_current_session(self, client, auth_headers, product_id):
        _sell(client, auth_headers, product_id)
        session_id = client.post("/pos/sessions/open", json={}, headers=auth_headers).json()["id"]
        _sell(client, auth_headers, product_id, 2)

        data = client.get("/reports/pos/x-report", headers=auth_headers).json()
        assert data["session_id"] == session_id
        assert data["summary"]["total_transactions"] == 1
        assert data["summary"]["items_sold"] == 2

    def test_since_parameter(self, client, auth_headers, product_id):
        _sell(client, auth_headers, product_id)
        data = client.get("/reports/pos/x-report?since=2020-01-01T00:00:00Z", headers=auth_headers).json()
        assert data["session_id"] is None
        assert data["summary"]["total_transactions"] == 1


class TestReportHistory:

    def _save(self, client, headers, **overrides):
        payload = {"type": "Income Statement", "data": {"net_income": "1500.00"}}
        payload.update(overrides)
        return client.post("/reports/history/", json=payload, headers=headers)

    def test_save_report(self, client, auth_headers):
        response = self._save(client, auth_headers, report_date="2026-03-31")
        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "Income Statement"
        assert data["title"] == "Income Statement"
        assert data["report_date"] == "2026-03-31"
        assert data["data"] == {"net_income": "1500.00"}

    def test_invalid_type(self, client, auth_headers):
        assert self._save(client, auth_headers, type="Trial Balance").status_code == 422

    def test_list_is_paginated_newest_first(self, client, auth_headers):
        for title in ("First", "Second", "Third"):
            self._save(client, auth_headers, title=title)

        page = client.get("/reports/history/?page=1&page_size=2", headers=auth_headers).json()
        assert page["total"] == 3
        assert page["total_pages"] == 2
        assert [r["title"] for r in page["reports"]] == ["Third", "Second"]

        page = client.get("/reports/history/?page=2&page_size=2", headers=auth_headers).json()
        assert [r["title"] for r in page["reports"]] == ["First"]

    def test_filter_by_type(self, client, auth_headers):
        self._save(client, auth_headers)
        self._save(client, auth_headers, type="Cash Flow")
        data = client.get("/reports/history/?type=Cash%20Flow", headers=auth_headers).json()
        assert data["total"] == 1
        assert data["reports"][0]["type"] == "Cash Flow"

    def test_get_and_delete(self, client, auth_headers, other_auth_headers):
        report_id = self._save(client, auth_headers).json()["id"]
        assert client.get(f"/reports/history/{report_id}", headers=other_auth_headers).status_code == 404
        assert client.get(f"/reports/history/{report_id}", headers=auth_headers).status_code == 200

        assert client.delete(f"/reports/history/{report_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/reports/history/{report_id}", headers=auth_headers).status_code == 404

    def test_end_of_day_report(self, client, auth_headers, product_id):
        _sell(client, auth_headers, product_id, 2)

        response = client.post("/reports/history/end-of-day", json={}, headers=auth_headers)
        assert response.status_code == 201
        report = response.json()
        today = utcnow().date().isoformat()
        assert report["type"] == "End of Day"
        assert report["title"] == f"End of Day {today}"
        assert report["data"]["totalSales"] == pytest.approx(52.43)
        assert report["data"]["totalTax"] == pytest.approx(3.43)
        assert report["data"]["totalTransactions"] == 1
        assert report["data"]["itemsSold"] == 2


class TestEndOfDayTask:

    def test_generates_once_per_tenant(self, client, auth_headers, product_id, db_session, sample_user):
        _sell(client, auth_headers, product_id)
        today = utcnow().date()

        assert generate_end_of_day_reports(today.isoformat()) == 1
        assert generate_end_of_day_reports(today.isoformat()) == 0

        reports = db_session.query(SavedReport).filter(SavedReport.tenant_id == sample_user.id).all()
        assert len(reports) == 1
        assert reports[0].report_date == today

    def test_skips_days_without_sales(self, client, auth_headers, product_id):
        _sell(client, auth_headers, product_id)
        assert generate_end_of_day_reports(date(2020, 1, 1).isoformat()) == 0
