from sqlalchemy import Column, String, Boolean, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
import enum

from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin


class UserRole(enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    ACCOUNTANT = "accountant"
    VIEWER = "viewer"


class User(Base, TimestampMixin):
    """Usuario autenticado; su id es también el tenant de sus propios datos."""
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(200), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class TeamMember(Base, TenantMixin, TimestampMixin):
    """
    Miembro invitado al tenant de un owner.

    El acceso se concede cuando un usuario con el mismo email se autentica
    y envía el header X-Tenant-ID del owner.
    """
    __tablename__ = "team_members"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), nullable=False, index=True)
    role = Column(String(20), nullable=False, default=UserRole.VIEWER.value)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_team_member_tenant_email"),
    )
