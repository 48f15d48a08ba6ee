from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.projects.service import ProjectService
from app.modules.projects.models import ProjectStatus
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectOut, ProjectList, ProjectDetail
)

projects_router = APIRouter(prefix="/projects", tags=["Projects"])


@projects_router.post("/", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return ProjectService(db).create_project(data, auth_context.tenant_id)


@projects_router.get("/", response_model=ProjectList)
def list_projects(
    status: Optional[ProjectStatus] = Query(None),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return ProjectService(db).list_projects(auth_context.tenant_id, status)


@projects_router.get("/{project_id}", response_model=ProjectDetail)
def get_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Detalle del proyecto con rentabilidad y transacciones vinculadas"""
    return ProjectService(db).get_project_detail(project_id, auth_context.tenant_id)


@projects_router.patch("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return ProjectService(db).update_project(project_id, data, auth_context.tenant_id)


@projects_router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_owner_or_admin())
):
    ProjectService(db).delete_project(project_id, auth_context.tenant_id)
