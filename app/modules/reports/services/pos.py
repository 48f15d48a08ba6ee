"""
POS Reports Service

Reporte X (turno en curso) y reporte Z (cierre del día).
"""

from datetime import date, datetime
from typing import Dict, Optional

from fastapi import HTTPException, status

from app.modules.pos.services import PosSaleService, PosSessionService, summarize_sales
from app.common.utils import utcnow, as_utc, start_of_day, end_of_day
from .base import BaseReportService


class PosReportService(BaseReportService):
    """Service for POS X/Z reports"""

    def get_z_report(self, report_date: Optional[date] = None) -> Dict:
        """Todas las ventas POS del día (UTC), con o sin sesión"""
        report_date = report_date or utcnow().date()
        sales = PosSaleService(self.db).query_sales(
            self.tenant_id, start_of_day(report_date), end_of_day(report_date)
        ).all()
        return {"report_date": report_date, "summary": summarize_sales(sales)}

    def get_x_report(self, since: Optional[datetime] = None) -> Dict:
        """
        Ventas del turno abierto, o desde `since` si se indica.

        Sin `since` y sin sesión abierta no hay turno que resumir (409).
        """
        session_id = None
        if since is None:
            session = PosSessionService(self.db).get_current_session(self.tenant_id)
            if not session:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="No hay una sesión de caja abierta; indique 'since'"
                )
            session_id = session.id
            since = session.opened_at

        sales = PosSaleService(self.db).query_sales(
            self.tenant_id, start=as_utc(since), session_id=session_id
        ).all()
        return {
            "session_id": session_id,
            "since": as_utc(since),
            "generated_at": utcnow(),
            "summary": summarize_sales(sales),
        }
