"""
Report History Router
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.modules.reports.models import ReportType
from ..services.history import ReportHistoryService, HISTORY_PAGE_SIZE
from ..schemas import SavedReportCreate, SavedReportOut, SavedReportList, EndOfDayRequest


router = APIRouter(prefix="/reports/history", tags=["Reports"])


@router.post("/", response_model=SavedReportOut, status_code=status.HTTP_201_CREATED)
def save_report(
    report_data: SavedReportCreate,
    auth_context: AuthContext = Depends(AuthDependencies.require_writer()),
    db: Session = Depends(get_db)
):
    """Guardar una foto de un reporte (type, data)"""
    return ReportHistoryService(db, auth_context.tenant_id).save_report(report_data, auth_context.user_id)


@router.post("/end-of-day", response_model=SavedReportOut, status_code=status.HTTP_201_CREATED)
def generate_end_of_day_report(
    request: EndOfDayRequest,
    auth_context: AuthContext = Depends(AuthDependencies.require_writer()),
    db: Session = Depends(get_db)
):
    """Calcular el reporte Z del día y guardarlo como 'End of Day'"""
    return ReportHistoryService(db, auth_context.tenant_id).generate_end_of_day_report(
        request.report_date, auth_context.user_id
    )


@router.get("/", response_model=SavedReportList)
def list_reports(
    page: int = Query(1, ge=1),
    page_size: int = Query(HISTORY_PAGE_SIZE, ge=1, le=100),
    type: Optional[ReportType] = Query(None, description="Filtrar por tipo de reporte"),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role()),
    db: Session = Depends(get_db)
):
    """Historial paginado, más recientes primero"""
    return ReportHistoryService(db, auth_context.tenant_id).list_reports(page, page_size, type)


@router.get("/{report_id}", response_model=SavedReportOut)
def get_report(
    report_id: UUID,
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role()),
    db: Session = Depends(get_db)
):
    return ReportHistoryService(db, auth_context.tenant_id).get_report(report_id)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(
    report_id: UUID,
    auth_context: AuthContext = Depends(AuthDependencies.require_writer()),
    db: Session = Depends(get_db)
):
    ReportHistoryService(db, auth_context.tenant_id).delete_report(report_id)
