"""
Base service class for Reports module

Sesión de base de datos, filtro por tenant y agregados comunes
sobre el libro de transacciones.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session

from app.modules.transactions.models import Transaction
from app.common.utils import to_money, start_of_day, end_of_day


class BaseReportService:
    """Base service class for all report services"""

    def __init__(self, db: Session, tenant_id: UUID):
        self.db = db
        self.tenant_id = tenant_id

    def _get_base_transaction_query(self, *columns):
        """Query de transacciones del tenant (o de las columnas indicadas)"""
        query = self.db.query(*columns) if columns else self.db.query(Transaction)
        return query.filter(Transaction.tenant_id == self.tenant_id)

    def _apply_date_filter(self, query, date_field, start_date: Optional[date], end_date: Optional[date]):
        """Filtro inclusivo por días completos en UTC; extremos opcionales"""
        conditions = []
        if start_date:
            conditions.append(date_field >= start_of_day(start_date))
        if end_date:
            conditions.append(date_field <= end_of_day(end_date))
        return query.filter(and_(*conditions)) if conditions else query

    def _income_expense_totals(self, start_date: Optional[date] = None,
                               end_date: Optional[date] = None) -> Tuple[Decimal, Decimal, int]:
        """
        (ingresos, gastos en valor absoluto, cantidad) del rango.

        Los montos del libro ya tienen signo, así que ingresos son los positivos
        y gastos los negativos.
        """
        query = self._get_base_transaction_query(
            func.coalesce(func.sum(case((Transaction.amount > 0, Transaction.amount), else_=0)), 0),
            func.coalesce(func.sum(case((Transaction.amount < 0, Transaction.amount), else_=0)), 0),
            func.count(Transaction.id)
        )
        query = self._apply_date_filter(query, Transaction.date, start_date, end_date)
        income, expenses, count = query.one()
        return to_money(income), to_money(abs(Decimal(str(expenses)))), count

    def _signed_total(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Decimal:
        query = self._get_base_transaction_query(func.coalesce(func.sum(Transaction.amount), 0))
        query = self._apply_date_filter(query, Transaction.date, start_date, end_date)
        return to_money(query.scalar())
