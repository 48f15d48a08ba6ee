from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.modules.accounts.models import AccountType


class AccountBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    type: AccountType

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('El nombre de la cuenta es requerido')
        return v


class AccountCreate(AccountBase):
    pass


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    type: Optional[AccountType] = None


class AccountOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    type: AccountType
    created_at: datetime

    class Config:
        from_attributes = True


class AccountList(BaseModel):
    accounts: List[AccountOut]
    total: int


class SeedResult(BaseModel):
    created: int
    skipped: int
    accounts: List[AccountOut]
