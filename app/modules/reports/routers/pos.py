"""
POS Reports Router
"""

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from ..services.pos import PosReportService
from ..schemas import ZReportResponse, XReportResponse


router = APIRouter(prefix="/reports/pos", tags=["Reports"])


@router.get("/z-report", response_model=ZReportResponse)
def get_z_report(
    report_date: Optional[date] = Query(None, description="Día a resumir (default: hoy UTC)"),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role()),
    db: Session = Depends(get_db)
):
    """Cierre del día: total de ventas, impuesto y número de ventas"""
    return PosReportService(db, auth_context.tenant_id).get_z_report(report_date)


@router.get("/x-report", response_model=XReportResponse)
def get_x_report(
    since: Optional[datetime] = Query(None, description="Desde cuándo; por defecto la apertura del turno"),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role()),
    db: Session = Depends(get_db)
):
    return PosReportService(db, auth_context.tenant_id).get_x_report(since)
