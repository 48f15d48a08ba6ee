from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4

from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin


class BankAccount(Base, TenantMixin, TimestampMixin):
    __tablename__ = "bank_accounts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    account_name = Column(String(120), nullable=False)
    account_number = Column(String(50), nullable=True)
    bank_name = Column(String(120), nullable=True)
