"""
Modelos SQLAlchemy para el módulo de Contactos

Clientes (para facturas) y proveedores comparten la tabla `contacts`,
diferenciados por `type`. Soft delete para auditabilidad.
"""

from app.database.database import Base
from sqlalchemy import Column, String, Text, Enum, Index
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.common.mixins import TenantMixin, TimestampMixin, SoftDeleteMixin
import enum


class ContactType(str, enum.Enum):
    """Tipos de contacto"""
    CUSTOMER = "customer"  # Cliente (facturas de venta)
    VENDOR = "vendor"      # Proveedor


class Contact(Base, TenantMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "contacts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    type = Column(Enum(ContactType), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(150), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_contacts_tenant_type_name", "tenant_id", "type", "name"),
    )

    def __repr__(self):
        return f"<Contact(id={self.id}, name='{self.name}', type={self.type})>"
