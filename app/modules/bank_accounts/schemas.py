from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
from datetime import datetime


class BankAccountBase(BaseModel):
    account_name: str = Field(..., min_length=1, max_length=120, description="Nombre de la cuenta")
    account_number: Optional[str] = Field(None, max_length=50)
    bank_name: Optional[str] = Field(None, max_length=120)


class BankAccountCreate(BankAccountBase):
    pass


class BankAccountUpdate(BaseModel):
    account_name: Optional[str] = Field(None, min_length=1, max_length=120)
    account_number: Optional[str] = Field(None, max_length=50)
    bank_name: Optional[str] = Field(None, max_length=120)


class BankAccountOut(BankAccountBase):
    id: UUID
    created_at: datetime

    class Config:
        from_attributes = True


class BankAccountList(BaseModel):
    bank_accounts: List[BankAccountOut]
    total: int


class BankAccountBalance(BaseModel):
    bank_account_id: UUID
    account_name: str
    balance: Decimal
    transaction_count: int
