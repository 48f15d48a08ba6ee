"""
Modelos SQLAlchemy para el módulo POS (Point of Sale)

- PosSession: turno de caja con apertura/cierre; el reporte X resume el turno abierto
- Sale: venta POS con sus líneas, vinculada al ingreso registrado en el libro

Solo puede existir una sesión abierta por tenant.
"""

from app.database.database import Base
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Numeric, Enum, Text
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.common.mixins import TenantMixin, TimestampMixin
from app.common.utils import utcnow
import enum


class PosSessionStatus(str, enum.Enum):
    """Estados de la sesión de caja"""
    OPEN = "open"
    CLOSED = "closed"


class PosSession(Base, TenantMixin, TimestampMixin):
    __tablename__ = "pos_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    status = Column(Enum(PosSessionStatus), nullable=False, default=PosSessionStatus.OPEN, index=True)

    # Control de apertura/cierre
    opened_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    closed_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    opened_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    opening_notes = Column(Text, nullable=True)
    closing_notes = Column(Text, nullable=True)

    sales = relationship("Sale", back_populates="session")


class Sale(Base, TenantMixin, TimestampMixin):
    __tablename__ = "sales"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    session_id = Column(UUID(as_uuid=True), ForeignKey("pos_sessions.id"), nullable=True, index=True)
    transaction_id = Column(UUID(as_uuid=True), ForeignKey("transactions.id"), nullable=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)

    date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    subtotal = Column(Numeric(15, 2), nullable=False)
    tax_rate = Column(Numeric(6, 4), nullable=False)
    tax = Column(Numeric(15, 2), nullable=False)
    total = Column(Numeric(15, 2), nullable=False)

    session = relationship("PosSession", back_populates="sales")
    line_items = relationship("SaleLineItem", back_populates="sale", cascade="all, delete-orphan")


class SaleLineItem(Base):
    __tablename__ = "sale_line_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    sale_id = Column(UUID(as_uuid=True), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)

    # Snapshot del producto al momento de la venta
    product_id = Column(UUID(as_uuid=True), nullable=False)
    name = Column(String(200), nullable=False)
    unit_price = Column(Numeric(15, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    line_total = Column(Numeric(15, 2), nullable=False)

    sale = relationship("Sale", back_populates="line_items")
