"""
Financial Reports Router

Dashboard, gráfico del mes y estados financieros.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from ..services.financial import FinancialReportService
from ..schemas import (
    DashboardResponse,
    OverviewChartResponse,
    IncomeStatementResponse,
    BalanceSheetResponse,
    CashFlowResponse
)
from ..utils import create_csv_response, prepare_income_statement_csv, CSV_HEADERS


router = APIRouter(prefix="/reports", tags=["Reports"])


def _validate_range(start_date: Optional[date], end_date: Optional[date]):
    if start_date and end_date and end_date < start_date:
        raise HTTPException(422, "end_date must be greater than or equal to start_date")


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role()),
    db: Session = Depends(get_db)
):
    """
    Tarjetas del mes actual: Total Revenue, Total Expenses, Net Income y Cash Flow,
    con variación porcentual frente al mes anterior y las últimas 20 transacciones.
    """
    return FinancialReportService(db, auth_context.tenant_id).get_dashboard()


@router.get("/overview", response_model=OverviewChartResponse)
def get_overview_chart(
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role()),
    db: Session = Depends(get_db)
):
    """Neto diario del mes actual"""
    return FinancialReportService(db, auth_context.tenant_id).get_overview_chart()


@router.get("/income-statement", response_model=None)
def get_income_statement(
    start_date: Optional[date] = Query(None, description="Start date for the report period"),
    end_date: Optional[date] = Query(None, description="End date for the report period"),
    export: Optional[str] = Query(None, pattern="^(csv)$", description="Export format: csv"),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role()),
    db: Session = Depends(get_db)
):
    """Estado de resultados con desglose por cuenta"""
    _validate_range(start_date, end_date)
    report_data = FinancialReportService(db, auth_context.tenant_id).get_income_statement(start_date, end_date)

    if export == "csv":
        csv_data = prepare_income_statement_csv(report_data)
        filename = f"income_statement_{start_date or 'all'}_{end_date or 'all'}.csv"
        return create_csv_response(csv_data, filename, CSV_HEADERS["income_statement"])

    return IncomeStatementResponse(**report_data)


@router.get("/balance-sheet", response_model=BalanceSheetResponse)
def get_balance_sheet(
    as_of_date: Optional[date] = Query(None, description="As of date (default: today)"),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role()),
    db: Session = Depends(get_db)
):
    return FinancialReportService(db, auth_context.tenant_id).get_balance_sheet(as_of_date)


@router.get("/cash-flow", response_model=CashFlowResponse)
def get_cash_flow(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role()),
    db: Session = Depends(get_db)
):
    _validate_range(start_date, end_date)
    return FinancialReportService(db, auth_context.tenant_id).get_cash_flow(start_date, end_date)
