from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime
from decimal import Decimal

from app.modules.assistant.models import ChatRole


# ===== CHAT =====

class ChatMessageOut(BaseModel):
    id: UUID
    role: ChatRole
    content: str
    created_at: datetime

    class Config:
        from_attributes = True


class ChatHistory(BaseModel):
    messages: List[ChatMessageOut]
    total: int


class ChatDayGroup(BaseModel):
    date: date
    messages: List[ChatMessageOut]


class ChatHistoryGrouped(BaseModel):
    groups: List[ChatDayGroup]


class AskRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=4000)

    @field_validator('query')
    @classmethod
    def strip_query(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('La consulta no puede estar vacía')
        return v


class AskResponse(BaseModel):
    answer: str
    user_message: ChatMessageOut
    assistant_message: ChatMessageOut


class QueryRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=4000)
    financial_data: Optional[str] = Field(None, description="Contexto; si se omite se construye un resumen del tenant")


class QueryResponse(BaseModel):
    answer: str


class SuggestionsResponse(BaseModel):
    suggestions: List[str]


# ===== TAX ADVISOR =====

class TaxAdviceRequest(BaseModel):
    topic: str = Field(..., min_length=1, max_length=200)


class TaxAdviceResponse(BaseModel):
    topic: str
    matched_topic: Optional[str] = None
    information: str


# ===== RECEIPTS / CATEGORIZATION =====

class ReceiptData(BaseModel):
    vendorName: str
    transactionDate: date
    description: str
    totalAmount: Decimal


class CategoryExample(BaseModel):
    description: str
    category: str


class CategorizationResult(BaseModel):
    category: str = Field(..., min_length=1)
    confidence: float = Field(..., ge=0, le=1)

    @field_validator('confidence', mode='before')
    @classmethod
    def clamp_confidence(cls, v):
        try:
            v = float(v)
        except (TypeError, ValueError):
            return 0.0
        return min(max(v, 0.0), 1.0)
