"""
Herramientas del asistente financiero.

Cada herramienta tiene un modelo Pydantic para sus argumentos (de ahí sale
el JSON schema que recibe el modelo) y se ejecuta con consultas limitadas
al tenant de la petición.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session
from uuid import UUID

from app.modules.accounts.service import AccountService
from app.modules.contacts.models import Contact, ContactType
from app.modules.transactions.models import Transaction
from app.modules.reports.services.financial import FinancialReportService
from app.modules.assistant.client import tool_to_openai_format
from app.modules.assistant.tax import get_kenyan_tax_info
from app.common.utils import start_of_day, end_of_day, as_utc

logger = logging.getLogger(__name__)

MAX_TOOL_TRANSACTIONS = 100


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GetTransactionsArgs(ToolArguments):
    limit: Optional[int] = Field(20, ge=1, le=MAX_TOOL_TRANSACTIONS,
                                 description="The maximum number of transactions to return.")
    start_date: Optional[date] = Field(None, alias="startDate",
                                       description="The start date for filtering transactions (YYYY-MM-DD).")
    end_date: Optional[date] = Field(None, alias="endDate",
                                     description="The end date for filtering transactions (YYYY-MM-DD).")
    category: Optional[str] = Field(None, description="Filter transactions by a specific category/account.")


class NoArgs(ToolArguments):
    pass


class GetFinancialSummaryArgs(ToolArguments):
    start_date: Optional[date] = Field(None, alias="startDate", description="Start date (YYYY-MM-DD).")
    end_date: Optional[date] = Field(None, alias="endDate", description="End date (YYYY-MM-DD).")


class GetKenyanTaxInfoArgs(ToolArguments):
    topic: str = Field(..., min_length=1, description=(
        'The specific tax topic the user is asking about (e.g., "VAT", "Income Tax", "Withholding Tax").'
    ))


def _parameters_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    schema = model.model_json_schema(by_alias=True)
    schema.pop("title", None)
    for prop in schema.get("properties", {}).values():
        prop.pop("title", None)
    schema.setdefault("properties", {})
    return schema


class FinancialTools:
    """Registro de herramientas ligado a una sesión y un tenant"""

    def __init__(self, db: Session, tenant_id: UUID):
        self.db = db
        self.tenant_id = tenant_id
        self._registry: Dict[str, tuple] = {
            "getTransactions": (
                "Retrieves a list of financial transactions, newest first.",
                GetTransactionsArgs, self.get_transactions
            ),
            "getAccounts": (
                "Retrieves the list of accounts from the chart of accounts.",
                NoArgs, self.get_accounts
            ),
            "getCustomers": (
                "Retrieves the list of customers.",
                NoArgs, self.get_customers
            ),
            "getFinancialSummary": (
                "Total revenue, total expenses and net income for a date range, with a per-account breakdown.",
                GetFinancialSummaryArgs, self.get_financial_summary
            ),
            "getKenyanTaxInfo": (
                "Provides information about specific Kenyan tax laws and regulations.",
                GetKenyanTaxInfoArgs, self.get_kenyan_tax_info
            ),
        }

    def definitions(self) -> List[Dict[str, Any]]:
        """Herramientas en formato OpenAI"""
        return [
            tool_to_openai_format(name, description, _parameters_schema(args_model))
            for name, (description, args_model, _) in self._registry.items()
        ]

    def execute(self, name: str, arguments: Dict[str, Any]) -> Any:
        """
        Ejecutar una herramienta pedida por el modelo.

        Los errores se devuelven como {"error": ...} para que el modelo
        pueda corregir la llamada en la siguiente ronda.
        """
        if name not in self._registry:
            logger.warning(f"Assistant requested unknown tool {name}")
            return {"error": f"Unknown tool: {name}"}

        _, args_model, handler = self._registry[name]
        try:
            args = args_model.model_validate(arguments or {})
        except ValidationError as e:
            logger.info(f"Invalid arguments for tool {name}: {e.errors()}")
            return {"error": f"Invalid arguments for {name}", "details": e.errors(include_url=False)}

        logger.info(f"Executing assistant tool {name} for tenant {self.tenant_id}")
        return handler(args)

    def get_transactions(self, args: GetTransactionsArgs) -> List[Dict[str, Any]]:
        query = self.db.query(Transaction).filter(Transaction.tenant_id == self.tenant_id)
        if args.start_date:
            query = query.filter(Transaction.date >= start_of_day(args.start_date))
        if args.end_date:
            query = query.filter(Transaction.date <= end_of_day(args.end_date))
        if args.category:
            query = query.filter(func.lower(Transaction.account) == args.category.strip().lower())

        transactions = query.order_by(Transaction.date.desc()).limit(args.limit or 20).all()
        return [
            {
                "id": str(t.id),
                "date": as_utc(t.date).date().isoformat(),
                "description": t.description,
                "amount": float(t.amount),
                "type": t.type.value,
                "account": t.account,
                "vendor": t.vendor_name,
            }
            for t in transactions
        ]

    def get_accounts(self, args: NoArgs) -> List[Dict[str, Any]]:
        accounts = AccountService(self.db).list_accounts(self.tenant_id).accounts
        return [
            {"id": str(a.id), "name": a.name, "type": a.type.value, "description": a.description}
            for a in accounts
        ]

    def get_customers(self, args: NoArgs) -> List[Dict[str, Any]]:
        customers = self.db.query(Contact).filter(
            Contact.tenant_id == self.tenant_id,
            Contact.type == ContactType.CUSTOMER,
            Contact.deleted_at.is_(None)
        ).order_by(Contact.name).all()
        return [
            {"id": str(c.id), "name": c.name, "email": c.email, "phone": c.phone}
            for c in customers
        ]

    def get_financial_summary(self, args: GetFinancialSummaryArgs) -> Dict[str, Any]:
        report = FinancialReportService(self.db, self.tenant_id).get_income_statement(
            args.start_date, args.end_date
        )
        return {
            "startDate": args.start_date.isoformat() if args.start_date else None,
            "endDate": args.end_date.isoformat() if args.end_date else None,
            "totalRevenue": float(report["total_revenue"]),
            "totalExpenses": float(report["total_expenses"]),
            "netIncome": float(report["net_income"]),
            "revenueByAccount": {i["account"]: float(i["amount"]) for i in report["revenue_by_account"]},
            "expensesByAccount": {i["account"]: float(i["amount"]) for i in report["expenses_by_account"]},
        }

    def get_kenyan_tax_info(self, args: GetKenyanTaxInfoArgs) -> str:
        _, information = get_kenyan_tax_info(args.topic)
        return information
