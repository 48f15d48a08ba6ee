from sqlalchemy import Column, String, Date, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
import enum

from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin
from app.common.utils import utcnow


class ReportType(str, enum.Enum):
    END_OF_DAY = "End of Day"
    X_REPORT = "X Report"
    INCOME_STATEMENT = "Income Statement"
    BALANCE_SHEET = "Balance Sheet"
    CASH_FLOW = "Cash Flow"


class SavedReport(Base, TenantMixin, TimestampMixin):
    """Reporte guardado en el historial; `data` es una foto de los totales"""
    __tablename__ = "saved_reports"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    type = Column(String(50), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    report_date = Column(Date, nullable=True, index=True)
    data = Column(JSON, nullable=False, default=dict)
    generated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    generated_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
