"""
Pydantic schemas for Reports module

Modelos de respuesta de los reportes financieros, POS e historial.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.modules.transactions.schemas import TransactionOut
from app.modules.pos.schemas import SalesSummary
from app.modules.reports.models import ReportType


# Dashboard
class DashboardMetric(BaseModel):
    value: Decimal
    previous: Decimal
    change_percent: Optional[float] = Field(None, description="None cuando el mes anterior es cero")


class DashboardResponse(BaseModel):
    period_start: date
    period_end: date
    currency: str
    total_revenue: DashboardMetric
    total_expenses: DashboardMetric
    net_income: DashboardMetric
    cash_flow: DashboardMetric
    transaction_count: int
    recent_transactions: List[TransactionOut]


class OverviewPoint(BaseModel):
    date: date
    income: Decimal
    expenses: Decimal
    net: Decimal


class OverviewChartResponse(BaseModel):
    period_start: date
    period_end: date
    points: List[OverviewPoint]


# Estados financieros
class AccountAmount(BaseModel):
    account: str
    amount: Decimal


class IncomeStatementResponse(BaseModel):
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal
    revenue_by_account: List[AccountAmount]
    expenses_by_account: List[AccountAmount]


class BalanceSheetResponse(BaseModel):
    as_of_date: date
    assets_cash: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    equity: Decimal


class CashFlowResponse(BaseModel):
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    opening_cash: Decimal
    operating_activities: Decimal
    investing_activities: Decimal
    financing_activities: Decimal
    net_change_in_cash: Decimal
    closing_cash: Decimal


# POS
class ZReportResponse(BaseModel):
    report_date: date
    summary: SalesSummary


class XReportResponse(BaseModel):
    session_id: Optional[UUID] = None
    since: datetime
    generated_at: datetime
    summary: SalesSummary


# Historial
class SavedReportCreate(BaseModel):
    type: ReportType
    title: Optional[str] = Field(None, max_length=200)
    report_date: Optional[date] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class EndOfDayRequest(BaseModel):
    report_date: Optional[date] = Field(None, description="Por defecto hoy (UTC)")


class SavedReportOut(BaseModel):
    id: UUID
    type: ReportType
    title: str
    report_date: Optional[date] = None
    data: Dict[str, Any]
    generated_at: datetime
    generated_by: Optional[UUID] = None

    class Config:
        from_attributes = True


class SavedReportList(BaseModel):
    reports: List[SavedReportOut]
    total: int
    page: int
    page_size: int
    total_pages: int
