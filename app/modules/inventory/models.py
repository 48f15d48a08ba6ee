from app.database.database import Base
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.common.mixins import TenantMixin, TimestampMixin
import enum


class MovementType(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"
    ADJ = "ADJ"
    SALE = "SALE"


class Product(Base, TenantMixin, TimestampMixin):
    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    sku = Column(String(50), nullable=True)
    barcode = Column(String(50), nullable=True, index=True)  # Código de barras
    price = Column(Numeric(15, 2), nullable=False)
    quantity_in_stock = Column(Integer, nullable=False, default=0)
    image_url = Column(String(500), nullable=True)

    movements = relationship("InventoryMovement", back_populates="product", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("tenant_id", "sku", name="uq_product_tenant_sku"),
        UniqueConstraint("tenant_id", "barcode", name="uq_product_tenant_barcode"),
    )


class InventoryMovement(Base, TenantMixin, TimestampMixin):
    __tablename__ = "inventory_movements"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)  # Can be positive or negative
    movement_type = Column(String(20), nullable=False)  # IN, OUT, ADJ, SALE
    reference = Column(String(100), nullable=True)  # Sale, adjustment, etc.
    notes = Column(String(255), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=True)

    product = relationship("Product", back_populates="movements")
