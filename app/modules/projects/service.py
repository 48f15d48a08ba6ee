from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from decimal import Decimal

from app.modules.projects.models import Project, ProjectStatus
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectOut, ProjectList, ProjectDetail, ProjectProfitability
)
from app.modules.transactions.models import Transaction
from app.modules.transactions.schemas import TransactionOut
from app.common.utils import to_money


def compute_profitability(amounts, budget: Optional[Decimal]) -> ProjectProfitability:
    """
    Rentabilidad a partir de montos con signo.

    revenue = suma de positivos, expenses = suma de |negativos|.
    El presupuesto se consume con los gastos.
    """
    revenue = sum((a for a in amounts if a > 0), Decimal("0"))
    expenses = sum((-a for a in amounts if a < 0), Decimal("0"))
    result = ProjectProfitability(
        revenue=to_money(revenue),
        expenses=to_money(expenses),
        profit=to_money(revenue - expenses)
    )
    if budget is not None:
        result.budget_used = to_money(expenses)
        result.budget_remaining = to_money(Decimal(budget) - expenses)
        if budget > 0:
            result.budget_used_percent = round(float(expenses / Decimal(budget) * 100), 2)
    return result


class ProjectService:
    def __init__(self, db: Session):
        self.db = db

    def get_project(self, project_id: UUID, tenant_id: UUID) -> Project:
        project = self.db.query(Project).filter(
            Project.id == project_id,
            Project.tenant_id == tenant_id,
            Project.deleted_at.is_(None)
        ).first()
        if not project:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Proyecto no encontrado")
        return project

    def create_project(self, data: ProjectCreate, tenant_id: UUID) -> Project:
        project = Project(tenant_id=tenant_id, **data.model_dump())
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def list_projects(self, tenant_id: UUID, project_status: Optional[ProjectStatus] = None) -> ProjectList:
        query = self.db.query(Project).filter(
            Project.tenant_id == tenant_id,
            Project.deleted_at.is_(None)
        )
        if project_status:
            query = query.filter(Project.status == project_status)
        projects = query.order_by(Project.created_at.desc()).all()
        return ProjectList(projects=[ProjectOut.model_validate(p) for p in projects], total=len(projects))

    def get_project_detail(self, project_id: UUID, tenant_id: UUID) -> ProjectDetail:
        project = self.get_project(project_id, tenant_id)
        transactions = self.db.query(Transaction).filter(
            Transaction.tenant_id == tenant_id,
            Transaction.project_id == project.id,
            Transaction.deleted_at.is_(None)
        ).order_by(Transaction.date.desc()).all()

        return ProjectDetail(
            **ProjectOut.model_validate(project).model_dump(),
            profitability=compute_profitability([t.amount for t in transactions], project.budget),
            transactions=[TransactionOut.model_validate(t) for t in transactions]
        )

    def update_project(self, project_id: UUID, data: ProjectUpdate, tenant_id: UUID) -> Project:
        project = self.get_project(project_id, tenant_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if field in ("name", "status") and value is None:
                continue
            setattr(project, field, value)
        self.db.commit()
        self.db.refresh(project)
        return project

    def delete_project(self, project_id: UUID, tenant_id: UUID) -> None:
        """Soft delete; las transacciones conservan el project_id"""
        project = self.get_project(project_id, tenant_id)
        project.soft_delete()
        self.db.commit()
