from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, Numeric, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from uuid import uuid4
from datetime import date
import enum

from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin, SoftDeleteMixin


class PayType(str, enum.Enum):
    HOURLY = "Hourly"
    SALARY = "Salary"


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Employee(Base, TenantMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "employees"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(200), nullable=False)
    email = Column(String(150), nullable=False)
    phone = Column(String(50), nullable=True)
    pay_rate = Column(Numeric(15, 2), nullable=False)  # Salario anual o tarifa por hora
    pay_type = Column(Enum(PayType), nullable=False)
    status = Column(Enum(EmployeeStatus), nullable=False, default=EmployeeStatus.ACTIVE, index=True)


class PayrollRun(Base, TenantMixin, TimestampMixin):
    __tablename__ = "payroll_runs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    run_date = Column(Date, nullable=False, default=date.today)
    total_amount = Column(Numeric(15, 2), nullable=False)
    employee_count = Column(Integer, nullable=False)
    transaction_id = Column(UUID(as_uuid=True), ForeignKey("transactions.id"), nullable=True)
    run_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)

    lines = relationship("PayrollLine", back_populates="payroll_run", cascade="all, delete-orphan")


class PayrollLine(Base):
    __tablename__ = "payroll_lines"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    payroll_run_id = Column(UUID(as_uuid=True), ForeignKey("payroll_runs.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(UUID(as_uuid=True), ForeignKey("employees.id"), nullable=False)

    # Snapshot del empleado al momento del pago
    employee_name = Column(String(200), nullable=False)
    pay_type = Column(Enum(PayType), nullable=False)
    pay_rate = Column(Numeric(15, 2), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)

    payroll_run = relationship("PayrollRun", back_populates="lines")
