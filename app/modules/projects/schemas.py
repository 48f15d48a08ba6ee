from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
from datetime import datetime

from app.modules.projects.models import ProjectStatus
from app.modules.transactions.schemas import TransactionOut


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.NOT_STARTED
    budget: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    budget: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)


class ProjectOut(ProjectBase):
    id: UUID
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectList(BaseModel):
    projects: List[ProjectOut]
    total: int


class ProjectProfitability(BaseModel):
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    budget_used: Optional[Decimal] = None
    budget_remaining: Optional[Decimal] = None
    budget_used_percent: Optional[float] = None


class ProjectDetail(ProjectOut):
    profitability: ProjectProfitability
    transactions: List[TransactionOut]
