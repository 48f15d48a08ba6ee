from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
from datetime import date, datetime

from app.modules.payroll.models import PayType, EmployeeStatus


class EmployeeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    pay_rate: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2,
                              description="Salario anual (Salary) o tarifa por hora (Hourly)")
    pay_type: PayType
    status: EmployeeStatus = EmployeeStatus.ACTIVE


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    pay_rate: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    pay_type: Optional[PayType] = None
    status: Optional[EmployeeStatus] = None


class EmployeeOut(EmployeeBase):
    id: UUID
    email: str
    created_at: datetime

    class Config:
        from_attributes = True


class EmployeeList(BaseModel):
    employees: List[EmployeeOut]
    total: int


class PayrollLineOut(BaseModel):
    employee_id: UUID
    employee_name: str
    pay_type: PayType
    pay_rate: Decimal
    amount: Decimal

    class Config:
        from_attributes = True


class PayrollPreview(BaseModel):
    run_date: date
    lines: List[PayrollLineOut]
    employee_count: int
    total_amount: Decimal


class PayrollRunCreate(BaseModel):
    run_date: Optional[date] = Field(None, description="Por defecto hoy")


class PayrollRunOut(BaseModel):
    id: UUID
    run_date: date
    total_amount: Decimal
    employee_count: int
    transaction_id: Optional[UUID] = None
    created_at: datetime
    lines: List[PayrollLineOut]

    class Config:
        from_attributes = True


class PayrollRunList(BaseModel):
    runs: List[PayrollRunOut]
    total: int
