"""
Utilities for Reports module

Rangos de fechas para los reportes y exportación CSV.
"""

import csv
import io
from calendar import monthrange
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from fastapi import Response


def month_bounds(day: date) -> Tuple[date, date]:
    """Primer y último día del mes de `day`"""
    first = day.replace(day=1)
    last = day.replace(day=monthrange(day.year, day.month)[1])
    return first, last


def previous_month_bounds(day: date) -> Tuple[date, date]:
    first_of_month = day.replace(day=1)
    return month_bounds(first_of_month - timedelta(days=1))


def create_csv_response(
    data: List[Dict[str, Any]],
    filename: str,
    headers: Dict[str, str] = None
) -> Response:
    """
    Create a CSV response from a list of dictionaries.

    Args:
        data: List of dictionaries with report data
        filename: Name for the CSV file
        headers: Optional mapping of field names to CSV headers
    """
    output = io.StringIO()
    fieldnames = list(headers.keys()) if headers else (list(data[0].keys()) if data else [])
    csv_headers = list(headers.values()) if headers else fieldnames

    writer = csv.DictWriter(output, fieldnames=fieldnames, extrasaction="ignore")
    writer.writerow(dict(zip(fieldnames, csv_headers)))
    for row in data:
        writer.writerow({key: format_csv_value(value) for key, value in row.items()})

    csv_content = output.getvalue()
    output.close()

    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Content-Type": "text/csv; charset=utf-8"
        }
    )


def format_csv_value(value: Any) -> str:
    if value is None:
        return ""
    elif isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def prepare_income_statement_csv(report_data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Una fila por cuenta más las filas de totales"""
    rows = []
    for item in report_data["revenue_by_account"]:
        rows.append({"section": "Revenue", "account": item["account"], "amount": item["amount"]})
    for item in report_data["expenses_by_account"]:
        rows.append({"section": "Expenses", "account": item["account"], "amount": item["amount"]})
    rows.append({"section": "Total", "account": "Total Revenue", "amount": report_data["total_revenue"]})
    rows.append({"section": "Total", "account": "Total Expenses", "amount": report_data["total_expenses"]})
    rows.append({"section": "Total", "account": "Net Income", "amount": report_data["net_income"]})
    return rows


CSV_HEADERS = {
    "income_statement": {
        "section": "Section",
        "account": "Account",
        "amount": "Amount",
    },
}
