from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional
from uuid import UUID
from datetime import date, datetime, time, timezone
from decimal import Decimal
import logging

from app.modules.payroll.models import Employee, EmployeeStatus, PayType, PayrollRun, PayrollLine
from app.modules.payroll.schemas import (
    EmployeeCreate, EmployeeUpdate, EmployeeOut, EmployeeList,
    PayrollLineOut, PayrollPreview, PayrollRunOut, PayrollRunList
)
from app.modules.transactions.models import TransactionType
from app.modules.transactions.service import TransactionService
from app.modules.accounts.models import AccountType
from app.modules.accounts.service import AccountService
from app.common.utils import to_money
from app.core.config import settings

logger = logging.getLogger(__name__)

SALARIES_ACCOUNT = "Salaries"


def calculate_pay(pay_rate: Decimal, pay_type: PayType) -> Decimal:
    """
    Pago de un periodo.

    Salary: salario anual / PAYROLL_SALARY_PERIODS (26, quincenal).
    Hourly: tarifa × PAYROLL_HOURLY_HOURS (80 horas por periodo).
    """
    pay_rate = Decimal(pay_rate)
    if pay_type == PayType.SALARY:
        return to_money(pay_rate / settings.PAYROLL_SALARY_PERIODS)
    return to_money(pay_rate * settings.PAYROLL_HOURLY_HOURS)


class PayrollService:
    def __init__(self, db: Session):
        self.db = db

    # ===== EMPLOYEES =====

    def get_employee(self, employee_id: UUID, tenant_id: UUID) -> Employee:
        employee = self.db.query(Employee).filter(
            Employee.id == employee_id,
            Employee.tenant_id == tenant_id,
            Employee.deleted_at.is_(None)
        ).first()
        if not employee:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empleado no encontrado")
        return employee

    def create_employee(self, data: EmployeeCreate, tenant_id: UUID) -> Employee:
        employee = Employee(tenant_id=tenant_id, **data.model_dump())
        employee.email = employee.email.lower()
        self.db.add(employee)
        self.db.commit()
        self.db.refresh(employee)
        return employee

    def list_employees(self, tenant_id: UUID, employee_status: Optional[EmployeeStatus] = None) -> EmployeeList:
        query = self.db.query(Employee).filter(
            Employee.tenant_id == tenant_id,
            Employee.deleted_at.is_(None)
        )
        if employee_status:
            query = query.filter(Employee.status == employee_status)
        employees = query.order_by(Employee.name).all()
        return EmployeeList(employees=[EmployeeOut.model_validate(e) for e in employees], total=len(employees))

    def update_employee(self, employee_id: UUID, data: EmployeeUpdate, tenant_id: UUID) -> Employee:
        employee = self.get_employee(employee_id, tenant_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field != "phone":
                continue
            setattr(employee, field, value.lower() if field == "email" else value)
        self.db.commit()
        self.db.refresh(employee)
        return employee

    def delete_employee(self, employee_id: UUID, tenant_id: UUID) -> None:
        """Soft delete; las corridas de nómina conservan la referencia"""
        employee = self.get_employee(employee_id, tenant_id)
        employee.soft_delete()
        employee.status = EmployeeStatus.INACTIVE
        self.db.commit()

    # ===== PAYROLL =====

    def _active_employees(self, tenant_id: UUID) -> List[Employee]:
        return self.db.query(Employee).filter(
            Employee.tenant_id == tenant_id,
            Employee.status == EmployeeStatus.ACTIVE,
            Employee.deleted_at.is_(None)
        ).order_by(Employee.name).all()

    def preview_payroll(self, tenant_id: UUID, run_date: Optional[date] = None) -> PayrollPreview:
        """Calcular lo que pagaría una corrida sin registrar nada"""
        employees = self._active_employees(tenant_id)
        lines = [
            PayrollLineOut(
                employee_id=e.id,
                employee_name=e.name,
                pay_type=e.pay_type,
                pay_rate=e.pay_rate,
                amount=calculate_pay(e.pay_rate, e.pay_type)
            )
            for e in employees
        ]
        return PayrollPreview(
            run_date=run_date or date.today(),
            lines=lines,
            employee_count=len(lines),
            total_amount=to_money(sum((line.amount for line in lines), Decimal("0")))
        )

    def run_payroll(self, tenant_id: UUID, user_id: UUID, run_date: Optional[date] = None) -> PayrollRun:
        """
        Ejecutar la nómina de los empleados activos.

        Registra un solo gasto en 'Salaries' por el total y la corrida con
        una línea por empleado, en la misma transacción.
        """
        preview = self.preview_payroll(tenant_id, run_date)
        if not preview.lines:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No hay empleados activos para procesar la nómina"
            )

        try:
            AccountService(self.db).ensure_account(SALARIES_ACCOUNT, AccountType.EXPENSE, tenant_id)
            transaction = TransactionService(self.db).record(
                tenant_id=tenant_id,
                description=f"Payroll run - {preview.run_date.isoformat()} ({preview.employee_count} employees)",
                amount=preview.total_amount,
                transaction_type=TransactionType.EXPENSE,
                account=SALARIES_ACCOUNT,
                date=datetime.combine(preview.run_date, time(12, 0), tzinfo=timezone.utc)
            )

            payroll_run = PayrollRun(
                tenant_id=tenant_id,
                run_date=preview.run_date,
                total_amount=preview.total_amount,
                employee_count=preview.employee_count,
                transaction_id=transaction.id,
                run_by=user_id,
                lines=[PayrollLine(**line.model_dump()) for line in preview.lines]
            )
            self.db.add(payroll_run)
            self.db.commit()
            self.db.refresh(payroll_run)

        except Exception as e:
            self.db.rollback()
            logger.error(f"Error running payroll for tenant {tenant_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error ejecutando la nómina"
            )

        logger.info(f"Payroll run {payroll_run.id}: {payroll_run.employee_count} employees, total {payroll_run.total_amount}")
        return payroll_run

    def list_runs(self, tenant_id: UUID, limit: int = 50, offset: int = 0) -> PayrollRunList:
        query = self.db.query(PayrollRun).options(selectinload(PayrollRun.lines)).filter(
            PayrollRun.tenant_id == tenant_id
        )
        total = query.count()
        runs = query.order_by(PayrollRun.run_date.desc(), PayrollRun.created_at.desc()) \
            .offset(offset).limit(limit).all()
        return PayrollRunList(runs=[PayrollRunOut.model_validate(r) for r in runs], total=total)

    def get_run(self, run_id: UUID, tenant_id: UUID) -> PayrollRun:
        payroll_run = self.db.query(PayrollRun).options(selectinload(PayrollRun.lines)).filter(
            PayrollRun.id == run_id,
            PayrollRun.tenant_id == tenant_id
        ).first()
        if not payroll_run:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Corrida de nómina no encontrada")
        return payroll_run
