from sqlalchemy import Column, String, Text, Enum, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
import enum

from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin


class AccountType(str, enum.Enum):
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    INCOME = "Income"
    EXPENSE = "Expense"


# Plan de cuentas por defecto: (nombre, tipo, descripción)
DEFAULT_CHART_OF_ACCOUNTS = [
    ("Cash", AccountType.ASSET, "Efectivo y saldos bancarios"),
    ("Accounts Receivable", AccountType.ASSET, "Facturas pendientes de cobro"),
    ("Inventory", AccountType.ASSET, "Mercancía disponible para la venta"),
    ("Accounts Payable", AccountType.LIABILITY, "Obligaciones con proveedores"),
    ("Taxes Payable", AccountType.LIABILITY, "Impuestos por pagar"),
    ("Owner's Equity", AccountType.EQUITY, "Aportes del propietario"),
    ("Sales Revenue", AccountType.INCOME, "Ventas de productos y POS"),
    ("Client Revenue", AccountType.INCOME, "Ingresos por clientes"),
    ("Consulting", AccountType.INCOME, "Servicios de consultoría"),
    ("Rent", AccountType.EXPENSE, None),
    ("Utilities", AccountType.EXPENSE, None),
    ("Salaries", AccountType.EXPENSE, "Nómina"),
    ("Software", AccountType.EXPENSE, None),
    ("Hardware", AccountType.EXPENSE, None),
    ("Office Supplies", AccountType.EXPENSE, None),
    ("Meals & Entertainment", AccountType.EXPENSE, None),
    ("Transport", AccountType.EXPENSE, None),
    ("Marketing", AccountType.EXPENSE, None),
    ("Bank Fees", AccountType.EXPENSE, None),
    ("Taxes", AccountType.EXPENSE, None),
]


class Account(Base, TenantMixin, TimestampMixin):
    """Cuenta del plan de cuentas. Las transacciones la referencian por nombre."""
    __tablename__ = "accounts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(AccountType), nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_account_tenant_name"),
    )
