"""
Esquemas Pydantic para el módulo POS
"""

from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.modules.pos.models import PosSessionStatus


# ===== SESSION SCHEMAS =====

class PosSessionOpen(BaseModel):
    opening_notes: Optional[str] = Field(None, max_length=500)


class PosSessionClose(BaseModel):
    closing_notes: Optional[str] = Field(None, max_length=500)


class PosSessionOut(BaseModel):
    id: UUID
    status: PosSessionStatus
    opened_by: UUID
    closed_by: Optional[UUID] = None
    opened_at: datetime
    closed_at: Optional[datetime] = None
    opening_notes: Optional[str] = None
    closing_notes: Optional[str] = None

    class Config:
        from_attributes = True


class PosSessionList(BaseModel):
    sessions: List[PosSessionOut]
    total: int


# ===== SALE SCHEMAS =====

class CartItem(BaseModel):
    product_id: UUID
    quantity: int = Field(..., ge=1, description="Unidades a vender")


class SaleCreate(BaseModel):
    items: List[CartItem] = Field(..., min_length=1, description="Carrito; las líneas repetidas se agrupan")


class SaleLineItemOut(BaseModel):
    product_id: UUID
    name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal

    class Config:
        from_attributes = True


class SaleOut(BaseModel):
    id: UUID
    session_id: Optional[UUID] = None
    transaction_id: Optional[UUID] = None
    date: datetime
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    total: Decimal
    line_items: List[SaleLineItemOut]

    class Config:
        from_attributes = True


class SaleList(BaseModel):
    sales: List[SaleOut]
    total: int
    limit: int
    offset: int


class SalesSummary(BaseModel):
    """Totales usados por los reportes X y Z"""
    total_sales: Decimal
    total_tax: Decimal
    total_transactions: int
    items_sold: int
