from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from app.modules.transactions.models import TransactionType, UNCATEGORIZED


def _clean_account(v):
    if v is None:
        return v
    v = v.strip()
    return v or UNCATEGORIZED


class TransactionCreate(BaseModel):
    date: Optional[datetime] = Field(None, description="Fecha del movimiento; por defecto ahora")
    description: str = Field(..., min_length=1, max_length=500)
    amount: Decimal = Field(..., max_digits=15, decimal_places=2, description="Se guarda con signo según el tipo")
    type: TransactionType
    account: str = Field(UNCATEGORIZED, max_length=120)
    bank_account_id: Optional[UUID] = None
    project_id: Optional[UUID] = None
    vendor_name: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None

    @field_validator('amount')
    @classmethod
    def amount_not_zero(cls, v):
        if v == 0:
            raise ValueError('El monto no puede ser cero')
        return v

    @field_validator('account', mode='before')
    @classmethod
    def clean_account(cls, v):
        return _clean_account(v) if v is not None else UNCATEGORIZED


class TransactionUpdate(BaseModel):
    date: Optional[datetime] = None
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    amount: Optional[Decimal] = Field(None, max_digits=15, decimal_places=2)
    type: Optional[TransactionType] = None
    account: Optional[str] = Field(None, max_length=120)
    bank_account_id: Optional[UUID] = None
    project_id: Optional[UUID] = None
    vendor_name: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None

    @field_validator('amount')
    @classmethod
    def amount_not_zero(cls, v):
        if v is not None and v == 0:
            raise ValueError('El monto no puede ser cero')
        return v

    @field_validator('account', mode='before')
    @classmethod
    def clean_account(cls, v):
        return _clean_account(v)


class TransactionAccountUpdate(BaseModel):
    account: str = Field(..., min_length=1, max_length=120)

    @field_validator('account', mode='before')
    @classmethod
    def clean_account(cls, v):
        return _clean_account(v)


class TransactionOut(BaseModel):
    id: UUID
    date: datetime
    description: str
    amount: Decimal
    type: TransactionType
    account: str
    bank_account_id: Optional[UUID] = None
    project_id: Optional[UUID] = None
    vendor_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TransactionList(BaseModel):
    transactions: List[TransactionOut]
    total: int
    limit: int
    offset: int


class CategorizeResponse(BaseModel):
    transaction_id: UUID
    category: str
    confidence: float
    applied: bool
