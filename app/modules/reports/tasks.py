"""
Background tasks for reports module
"""
from datetime import date
from typing import Optional
import logging

from app.core.celery import celery_app
from app.database.database import SessionLocal
from app.modules.pos.models import Sale
from app.modules.reports.services.history import ReportHistoryService
from app.common.utils import utcnow, start_of_day, end_of_day

logger = logging.getLogger(__name__)


@celery_app.task
def generate_end_of_day_reports(report_date: Optional[str] = None):
    """
    Guardar el reporte End of Day de cada tenant con ventas POS en el día.

    Los tenants que ya tienen el reporte de esa fecha se omiten.
    """
    day = date.fromisoformat(report_date) if report_date else utcnow().date()
    db = SessionLocal()
    try:
        tenant_ids = [
            row[0] for row in db.query(Sale.tenant_id).filter(
                Sale.date >= start_of_day(day),
                Sale.date <= end_of_day(day)
            ).distinct().all()
        ]
        generated = 0
        for tenant_id in tenant_ids:
            service = ReportHistoryService(db, tenant_id)
            if service.has_end_of_day_report(day):
                continue
            service.generate_end_of_day_report(day)
            generated += 1
        logger.info(f"End of day reports for {day}: {generated} generated")
        return generated
    finally:
        db.close()
