"""
Esquemas Pydantic para el módulo de Contactos
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.modules.contacts.models import ContactType


class ContactBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Nombre del contacto")
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('El nombre es requerido')
        return v

    @field_validator('email', mode='before', check_fields=False)
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class CustomerCreate(ContactBase):
    """Los clientes requieren email para el envío de facturas"""
    email: EmailStr


class VendorCreate(ContactBase):
    email: Optional[EmailStr] = None


class ContactUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class ContactOut(BaseModel):
    id: UUID
    type: ContactType
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ContactList(BaseModel):
    contacts: List[ContactOut]
    total: int
    limit: int
    offset: int
