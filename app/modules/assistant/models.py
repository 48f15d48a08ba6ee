from sqlalchemy import Column, Text, Enum
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
import enum

from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin


class ChatRole(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(Base, TenantMixin, TimestampMixin):
    """Historial del chat con el asistente, por tenant y usuario"""
    __tablename__ = "chat_messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    role = Column(Enum(ChatRole), nullable=False)
    content = Column(Text, nullable=False)
