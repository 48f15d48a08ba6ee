"""
Background tasks for invoices module
"""
import logging

from app.core.celery import celery_app
from app.database.database import SessionLocal
from app.modules.invoices.service import mark_overdue_invoices

logger = logging.getLogger(__name__)


@celery_app.task(bind=True)
def mark_overdue_invoices_task(self):
    """Tarea periódica: facturas enviadas y vencidas pasan a Overdue"""
    db = SessionLocal()
    try:
        return mark_overdue_invoices(db)
    except Exception as e:
        logger.error(f"Failed to mark overdue invoices: {e}")
        raise self.retry(exc=e, countdown=60, max_retries=3)
    finally:
        db.close()
