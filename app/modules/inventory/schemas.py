from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
from datetime import datetime


def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=50)
    barcode: Optional[str] = Field(None, max_length=50)
    price: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    image_url: Optional[str] = Field(None, max_length=500)

    @field_validator('sku', 'barcode', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class ProductCreate(ProductBase):
    quantity_in_stock: int = Field(0, ge=0)


class ProductUpdate(BaseModel):
    """El stock se modifica con ajustes, no con update"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=50)
    barcode: Optional[str] = Field(None, max_length=50)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    image_url: Optional[str] = Field(None, max_length=500)

    @field_validator('sku', 'barcode', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class ProductOut(ProductBase):
    id: UUID
    quantity_in_stock: int
    created_at: datetime

    class Config:
        from_attributes = True


class ProductList(BaseModel):
    products: List[ProductOut]
    total: int
    limit: int
    offset: int


class StockAdjustment(BaseModel):
    delta: int = Field(..., description="Cantidad a sumar (positiva) o restar (negativa)")
    notes: Optional[str] = Field(None, max_length=255, description="Adjustment notes")

    @field_validator('delta')
    @classmethod
    def delta_not_zero(cls, v):
        if v == 0:
            raise ValueError('El ajuste no puede ser cero')
        return v


class InventoryMovementOut(BaseModel):
    id: UUID
    product_id: UUID
    quantity: int
    movement_type: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
