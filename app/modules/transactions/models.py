from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, Enum, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from uuid import uuid4
import enum

from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin
from app.common.utils import utcnow


class TransactionType(str, enum.Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


UNCATEGORIZED = "Uncategorized"


class Transaction(Base, TenantMixin, TimestampMixin):
    """
    Movimiento del libro.

    El monto se guarda con signo: positivo para Income, negativo para Expense.
    La cuenta se referencia por nombre (plan de cuentas del tenant).
    """
    __tablename__ = "transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    type = Column(Enum(TransactionType), nullable=False, index=True)
    account = Column(String(120), nullable=False, default=UNCATEGORIZED, index=True)
    vendor_name = Column(String(200), nullable=True)  # Extraído de recibos
    notes = Column(Text, nullable=True)

    bank_account_id = Column(UUID(as_uuid=True), ForeignKey("bank_accounts.id"), nullable=True, index=True)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True, index=True)

    # Relationships
    bank_account = relationship("BankAccount")
    project = relationship("Project")


def signed_amount(amount, transaction_type: TransactionType):
    """Aplicar la regla de signo: Income positivo, Expense negativo."""
    value = abs(amount)
    return -value if transaction_type == TransactionType.EXPENSE else value
