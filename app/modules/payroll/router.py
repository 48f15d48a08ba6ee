from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import date

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.payroll.service import PayrollService
from app.modules.payroll.models import EmployeeStatus
from app.modules.payroll.schemas import (
    EmployeeCreate, EmployeeUpdate, EmployeeOut, EmployeeList,
    PayrollPreview, PayrollRunCreate, PayrollRunOut, PayrollRunList
)

payroll_router = APIRouter(prefix="/payroll", tags=["Payroll"])


# ===== EMPLOYEES =====

@payroll_router.post("/employees", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(
    data: EmployeeCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_owner_or_admin())
):
    return PayrollService(db).create_employee(data, auth_context.tenant_id)


@payroll_router.get("/employees", response_model=EmployeeList)
def list_employees(
    status: Optional[EmployeeStatus] = Query(None),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return PayrollService(db).list_employees(auth_context.tenant_id, status)


@payroll_router.get("/employees/{employee_id}", response_model=EmployeeOut)
def get_employee(
    employee_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return PayrollService(db).get_employee(employee_id, auth_context.tenant_id)


@payroll_router.patch("/employees/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: UUID,
    data: EmployeeUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_owner_or_admin())
):
    return PayrollService(db).update_employee(employee_id, data, auth_context.tenant_id)


@payroll_router.delete("/employees/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(
    employee_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_owner_or_admin())
):
    PayrollService(db).delete_employee(employee_id, auth_context.tenant_id)


# ===== RUNS =====

@payroll_router.get("/preview", response_model=PayrollPreview)
def preview_payroll(
    run_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    """Montos que pagaría la próxima corrida"""
    return PayrollService(db).preview_payroll(auth_context.tenant_id, run_date)


@payroll_router.post("/run", response_model=PayrollRunOut, status_code=status.HTTP_201_CREATED)
def run_payroll(
    data: PayrollRunCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_owner_or_admin())
):
    """
    Ejecutar nómina

    Salary paga pay_rate / 26; Hourly paga pay_rate × 80.
    Registra un gasto en 'Salaries' por el total.
    """
    return PayrollService(db).run_payroll(auth_context.tenant_id, auth_context.user_id, data.run_date)


@payroll_router.get("/runs", response_model=PayrollRunList)
def list_payroll_runs(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return PayrollService(db).list_runs(auth_context.tenant_id, limit, offset)


@payroll_router.get("/runs/{run_id}", response_model=PayrollRunOut)
def get_payroll_run(
    run_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return PayrollService(db).get_run(run_id, auth_context.tenant_id)
