"""
Financial Reports Service

Dashboard, gráfico diario y estados financieros calculados sobre el libro
de transacciones del tenant.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import func

from app.modules.transactions.models import Transaction
from app.modules.transactions.schemas import TransactionOut
from app.common.utils import to_money, percent_change, as_utc, utcnow
from app.core.config import settings
from .base import BaseReportService
from ..utils import month_bounds, previous_month_bounds

RECENT_TRANSACTIONS_LIMIT = 20


def _metric(current: Decimal, previous: Decimal) -> Dict:
    return {
        "value": to_money(current),
        "previous": to_money(previous),
        "change_percent": percent_change(current, previous),
    }


class FinancialReportService(BaseReportService):
    """Service for financial statements and the dashboard"""

    def get_dashboard(self, today: Optional[date] = None) -> Dict:
        """
        Tarjetas del dashboard para el mes actual comparadas con el mes anterior.

        Cash flow es la suma con signo de los movimientos del mes, que coincide
        con la utilidad neta porque no se modelan pasivos.
        """
        today = today or utcnow().date()
        start, end = month_bounds(today)
        prev_start, prev_end = previous_month_bounds(today)

        revenue, expenses, count = self._income_expense_totals(start, end)
        prev_revenue, prev_expenses, _ = self._income_expense_totals(prev_start, prev_end)
        net = revenue - expenses
        prev_net = prev_revenue - prev_expenses
        cash_flow = self._signed_total(start, end)
        prev_cash_flow = self._signed_total(prev_start, prev_end)

        recent = self._get_base_transaction_query().order_by(
            Transaction.date.desc(), Transaction.created_at.desc()
        ).limit(RECENT_TRANSACTIONS_LIMIT).all()

        return {
            "period_start": start,
            "period_end": end,
            "currency": settings.DEFAULT_CURRENCY,
            "total_revenue": _metric(revenue, prev_revenue),
            "total_expenses": _metric(expenses, prev_expenses),
            "net_income": _metric(net, prev_net),
            "cash_flow": _metric(cash_flow, prev_cash_flow),
            "transaction_count": count,
            "recent_transactions": [TransactionOut.model_validate(t) for t in recent],
        }

    def get_overview_chart(self, today: Optional[date] = None) -> Dict:
        """Un punto por cada día del mes actual, incluidos los días sin movimientos"""
        today = today or utcnow().date()
        start, end = month_bounds(today)

        query = self._get_base_transaction_query(Transaction.date, Transaction.amount)
        rows = self._apply_date_filter(query, Transaction.date, start, end).all()

        income: Dict[date, Decimal] = defaultdict(Decimal)
        expenses: Dict[date, Decimal] = defaultdict(Decimal)
        for tx_date, amount in rows:
            amount = Decimal(amount)
            tx_day = as_utc(tx_date).date()
            if amount >= 0:
                income[tx_day] += amount
            else:
                expenses[tx_day] += -amount

        points = []
        day = start
        while day <= end:
            points.append({
                "date": day,
                "income": to_money(income[day]),
                "expenses": to_money(expenses[day]),
                "net": to_money(income[day] - expenses[day]),
            })
            day += timedelta(days=1)

        return {"period_start": start, "period_end": end, "points": points}

    def get_income_statement(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Dict:
        """Ingresos y gastos por cuenta; sin rango se usa todo el histórico"""
        revenue_by_account = []
        expenses_by_account = []
        # Una cuenta con ingresos y gastos aparece en ambas secciones
        for sign, target in ((1, revenue_by_account), (-1, expenses_by_account)):
            query = self._get_base_transaction_query(
                Transaction.account,
                func.coalesce(func.sum(Transaction.amount), 0)
            )
            query = self._apply_date_filter(query, Transaction.date, start_date, end_date)
            query = query.filter(Transaction.amount > 0 if sign > 0 else Transaction.amount < 0)
            for account, amount in query.group_by(Transaction.account).all():
                target.append({"account": account, "amount": to_money(abs(Decimal(str(amount))))})

        revenue_by_account.sort(key=lambda item: item["amount"], reverse=True)
        expenses_by_account.sort(key=lambda item: item["amount"], reverse=True)

        total_revenue, total_expenses, _ = self._income_expense_totals(start_date, end_date)
        return {
            "period_start": start_date,
            "period_end": end_date,
            "total_revenue": total_revenue,
            "total_expenses": total_expenses,
            "net_income": to_money(total_revenue - total_expenses),
            "revenue_by_account": revenue_by_account,
            "expenses_by_account": expenses_by_account,
        }

    def get_balance_sheet(self, as_of_date: Optional[date] = None) -> Dict:
        as_of_date = as_of_date or utcnow().date()
        assets_cash = self._signed_total(end_date=as_of_date)
        total_liabilities = Decimal("0.00")
        return {
            "as_of_date": as_of_date,
            "assets_cash": assets_cash,
            "total_assets": assets_cash,
            "total_liabilities": total_liabilities,
            "equity": to_money(assets_cash - total_liabilities),
        }

    def get_cash_flow(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Dict:
        """Método directo: todas las actividades son operativas"""
        opening_cash = (
            self._signed_total(end_date=start_date - timedelta(days=1)) if start_date else Decimal("0.00")
        )
        operating = self._signed_total(start_date, end_date)
        investing = Decimal("0.00")
        financing = Decimal("0.00")
        net_change = to_money(operating + investing + financing)
        return {
            "period_start": start_date,
            "period_end": end_date,
            "opening_cash": opening_cash,
            "operating_activities": operating,
            "investing_activities": investing,
            "financing_activities": financing,
            "net_change_in_cash": net_change,
            "closing_cash": to_money(opening_cash + net_change),
        }
