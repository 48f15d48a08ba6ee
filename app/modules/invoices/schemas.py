from pydantic import BaseModel, Field, model_validator
from decimal import Decimal
from typing import Optional, List, Dict
from uuid import UUID
from datetime import date, datetime

from app.modules.invoices.models import InvoiceStatus


class InvoiceLineItemCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    quantity: Decimal = Field(..., gt=0, max_digits=10, decimal_places=3)
    unit_price: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)


class InvoiceLineItemOut(BaseModel):
    id: UUID
    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal

    class Config:
        from_attributes = True


class InvoiceCreate(BaseModel):
    customer_id: UUID
    issue_date: Optional[date] = Field(None, description="Por defecto hoy")
    due_date: Optional[date] = Field(None, description="Por defecto fecha de emisión + 30 días")
    notes: Optional[str] = None
    items: List[InvoiceLineItemCreate] = Field(..., min_length=1)

    @model_validator(mode='after')
    def validate_dates(self):
        if self.issue_date and self.due_date and self.due_date < self.issue_date:
            raise ValueError('La fecha de vencimiento no puede ser anterior a la fecha de emisión')
        return self


class InvoiceUpdate(BaseModel):
    """Solo aplica a facturas en borrador"""
    customer_id: Optional[UUID] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    items: Optional[List[InvoiceLineItemCreate]] = Field(None, min_length=1)


class InvoiceOut(BaseModel):
    id: UUID
    invoice_number: str
    customer_id: UUID
    customer_name: str
    status: InvoiceStatus
    issue_date: date
    due_date: date
    notes: Optional[str] = None
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    transaction_id: Optional[UUID] = None
    sent_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class InvoiceDetail(InvoiceOut):
    line_items: List[InvoiceLineItemOut]


class InvoiceList(BaseModel):
    invoices: List[InvoiceOut]
    total: int
    limit: int
    offset: int


class InvoiceStatusSummary(BaseModel):
    count: int
    amount: Decimal


class InvoiceSummary(BaseModel):
    by_status: Dict[str, InvoiceStatusSummary]
    total_invoices: int
    outstanding_amount: Decimal
    overdue_amount: Decimal
    paid_amount: Decimal
