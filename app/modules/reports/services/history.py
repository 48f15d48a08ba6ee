"""
Report History Service

Historial de reportes guardados (End of Day y fotos de otros reportes).
"""

import logging
import math
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status

from app.modules.reports.models import SavedReport, ReportType
from app.modules.reports.schemas import SavedReportCreate, SavedReportOut, SavedReportList
from app.common.utils import utcnow
from .base import BaseReportService
from .pos import PosReportService

logger = logging.getLogger(__name__)

HISTORY_PAGE_SIZE = 10


def _json_safe(data):
    """Decimal/fechas a tipos serializables para la columna JSON"""
    if isinstance(data, dict):
        return {key: _json_safe(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_json_safe(value) for value in data]
    if isinstance(data, date):
        return data.isoformat()
    if isinstance(data, Decimal):
        return float(data)
    return data


class ReportHistoryService(BaseReportService):

    def save_report(self, report_data: SavedReportCreate, user_id: Optional[UUID] = None) -> SavedReport:
        report = SavedReport(
            tenant_id=self.tenant_id,
            type=report_data.type.value,
            title=report_data.title or report_data.type.value,
            report_date=report_data.report_date,
            data=_json_safe(report_data.data),
            generated_at=utcnow(),
            generated_by=user_id
        )
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        logger.info(f"Saved {report.type} report {report.id} for tenant {self.tenant_id}")
        return report

    def generate_end_of_day_report(self, report_date: Optional[date] = None,
                                   user_id: Optional[UUID] = None) -> SavedReport:
        """Guardar el reporte Z del día; totalSales, totalTax y totalTransactions"""
        z_report = PosReportService(self.db, self.tenant_id).get_z_report(report_date)
        summary = z_report["summary"]
        return self.save_report(
            SavedReportCreate(
                type=ReportType.END_OF_DAY,
                title=f"End of Day {z_report['report_date'].isoformat()}",
                report_date=z_report["report_date"],
                data={
                    "totalSales": summary.total_sales,
                    "totalTax": summary.total_tax,
                    "totalTransactions": summary.total_transactions,
                    "itemsSold": summary.items_sold,
                }
            ),
            user_id=user_id
        )

    def has_end_of_day_report(self, report_date: date) -> bool:
        return self.db.query(SavedReport.id).filter(
            SavedReport.tenant_id == self.tenant_id,
            SavedReport.type == ReportType.END_OF_DAY.value,
            SavedReport.report_date == report_date
        ).first() is not None

    def list_reports(self, page: int = 1, page_size: int = HISTORY_PAGE_SIZE,
                     report_type: Optional[ReportType] = None) -> SavedReportList:
        query = self.db.query(SavedReport).filter(SavedReport.tenant_id == self.tenant_id)
        if report_type:
            query = query.filter(SavedReport.type == report_type.value)

        total = query.count()
        reports = query.order_by(SavedReport.generated_at.desc()) \
            .offset((page - 1) * page_size).limit(page_size).all()

        return SavedReportList(
            reports=[SavedReportOut.model_validate(r) for r in reports],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if total else 0
        )

    def get_report(self, report_id: UUID) -> SavedReport:
        report = self.db.query(SavedReport).filter(
            SavedReport.id == report_id,
            SavedReport.tenant_id == self.tenant_id
        ).first()
        if not report:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reporte no encontrado")
        return report

    def delete_report(self, report_id: UUID) -> None:
        report = self.get_report(report_id)
        self.db.delete(report)
        self.db.commit()
