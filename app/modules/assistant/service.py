"""
Servicio del asistente: historial de chat, preguntas con herramientas
y consultas sobre datos financieros.
"""
import json
import logging
from collections import OrderedDict
from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.modules.assistant.models import ChatMessage, ChatRole
from app.modules.assistant.schemas import (
    ChatMessageOut, ChatHistory, ChatDayGroup, ChatHistoryGrouped, AskResponse, QueryResponse,
    TaxAdviceResponse
)
from app.modules.assistant.client import AIClient
from app.modules.assistant.tools import FinancialTools
from app.modules.assistant.tax import get_kenyan_tax_info
from app.modules.assistant.flows import query_financial_data
from app.modules.assistant import prompts
from app.modules.reports.services.financial import FinancialReportService
from app.modules.reports.utils import month_bounds
from app.modules.accounts.service import AccountService
from app.common.utils import utcnow, as_utc
from app.core.config import settings

logger = logging.getLogger(__name__)

# Mensajes previos enviados como contexto en cada pregunta
HISTORY_CONTEXT_MESSAGES = 10


def run_financial_assistant(
    client: AIClient,
    tools: FinancialTools,
    query: str,
    history: Optional[List[Dict[str, Any]]] = None,
) -> str:
    """
    Bucle de tool calling.

    Termina cuando el modelo responde sin pedir herramientas. Al agotar
    AI_MAX_TOOL_ROUNDS se hace una última llamada sin herramientas para
    obligar a una respuesta final.
    """
    messages: List[Dict[str, Any]] = [{
        "role": "system",
        "content": prompts.FINANCIAL_ASSISTANT_PROMPT.format(
            currency=settings.DEFAULT_CURRENCY, today=utcnow().date().isoformat()
        ),
    }]
    messages.extend(history or [])
    messages.append({"role": "user", "content": query})
    definitions = tools.definitions()

    for round_number in range(settings.AI_MAX_TOOL_ROUNDS):
        response = client.chat(messages, tools=definitions)
        if not response.tool_calls:
            return response.content.strip()

        messages.append({
            "role": "assistant",
            "content": response.content or None,
            "tool_calls": [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": json.dumps(tc.arguments)},
                }
                for tc in response.tool_calls
            ],
        })
        for tc in response.tool_calls:
            result = tools.execute(tc.name, tc.arguments)
            messages.append({
                "role": "tool",
                "tool_call_id": tc.id,
                "content": json.dumps(result, default=str),
            })
        logger.debug(f"Assistant tool round {round_number + 1}: {[tc.name for tc in response.tool_calls]}")

    logger.warning("Assistant reached the tool round limit, requesting final answer")
    return client.chat(messages).content.strip()


def build_financial_summary(db: Session, tenant_id: UUID, today: Optional[date] = None) -> str:
    """Resumen en texto del mes actual y del histórico para /assistant/query"""
    reports = FinancialReportService(db, tenant_id)
    start, end = month_bounds(today or utcnow().date())
    month = reports.get_income_statement(start, end)
    all_time = reports.get_income_statement()
    accounts = AccountService(db).list_accounts(tenant_id).accounts

    if not all_time["revenue_by_account"] and not all_time["expenses_by_account"]:
        return ""

    lines = [
        f"Currency: {settings.DEFAULT_CURRENCY}",
        f"This month ({start} to {end}): revenue {month['total_revenue']}, "
        f"expenses {month['total_expenses']}, net income {month['net_income']}",
        f"All time: revenue {all_time['total_revenue']}, expenses {all_time['total_expenses']}, "
        f"net income {all_time['net_income']}",
    ]
    for item in all_time["revenue_by_account"]:
        lines.append(f"Revenue - {item['account']}: {item['amount']}")
    for item in all_time["expenses_by_account"]:
        lines.append(f"Expense - {item['account']}: {item['amount']}")
    if accounts:
        lines.append("Accounts: " + ", ".join(a.name for a in accounts))
    return "\n".join(lines)


class AssistantService:
    def __init__(self, db: Session):
        self.db = db

    def _history_query(self, tenant_id: UUID, user_id: UUID):
        return self.db.query(ChatMessage).filter(
            ChatMessage.tenant_id == tenant_id,
            ChatMessage.user_id == user_id
        )

    def _add_message(self, tenant_id: UUID, user_id: UUID, role: ChatRole, content: str) -> ChatMessage:
        message = ChatMessage(
            tenant_id=tenant_id, user_id=user_id, role=role, content=content, created_at=utcnow()
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def get_history(self, tenant_id: UUID, user_id: UUID) -> ChatHistory:
        """Mensajes en orden cronológico"""
        messages = self._history_query(tenant_id, user_id).order_by(
            ChatMessage.created_at.asc()
        ).all()
        return ChatHistory(
            messages=[ChatMessageOut.model_validate(m) for m in messages],
            total=len(messages)
        )

    def get_grouped_history(self, tenant_id: UUID, user_id: UUID) -> ChatHistoryGrouped:
        groups: "OrderedDict[date, List[ChatMessageOut]]" = OrderedDict()
        for message in self.get_history(tenant_id, user_id).messages:
            groups.setdefault(as_utc(message.created_at).date(), []).append(message)
        return ChatHistoryGrouped(
            groups=[ChatDayGroup(date=day, messages=messages) for day, messages in groups.items()]
        )

    def clear_history(self, tenant_id: UUID, user_id: UUID) -> int:
        deleted = self._history_query(tenant_id, user_id).delete(synchronize_session=False)
        self.db.commit()
        logger.info(f"Cleared {deleted} chat messages for user {user_id}")
        return deleted

    def _recent_context(self, tenant_id: UUID, user_id: UUID) -> List[Dict[str, str]]:
        recent = self._history_query(tenant_id, user_id).order_by(
            ChatMessage.created_at.desc()
        ).limit(HISTORY_CONTEXT_MESSAGES).all()
        return [{"role": m.role.value, "content": m.content} for m in reversed(recent)]

    def ask(self, query: str, tenant_id: UUID, user_id: UUID, client: AIClient) -> AskResponse:
        """
        Guardar la pregunta, responder con el asistente y guardar la respuesta.

        Si el modelo falla se guarda y devuelve el mensaje de disculpa.
        """
        history = self._recent_context(tenant_id, user_id)
        user_message = self._add_message(tenant_id, user_id, ChatRole.USER, query)

        try:
            answer = run_financial_assistant(client, FinancialTools(self.db, tenant_id), query, history)
        except Exception as e:
            # El rollback deja la sesión usable tras errores de las herramientas
            self.db.rollback()
            logger.error(f"Financial assistant failed for user {user_id}: {e}")
            answer = ""

        answer = answer or prompts.FALLBACK_ANSWER
        assistant_message = self._add_message(tenant_id, user_id, ChatRole.ASSISTANT, answer)

        return AskResponse(
            answer=answer,
            user_message=ChatMessageOut.model_validate(user_message),
            assistant_message=ChatMessageOut.model_validate(assistant_message)
        )

    def query(self, query: str, financial_data: Optional[str], tenant_id: UUID, client: AIClient) -> QueryResponse:
        if financial_data is None:
            financial_data = build_financial_summary(self.db, tenant_id)
        answer = query_financial_data(client, query, financial_data)
        if not answer:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="El servicio de IA devolvió una respuesta vacía"
            )
        return QueryResponse(answer=answer)

    @staticmethod
    def tax_advice(topic: str) -> TaxAdviceResponse:
        matched, information = get_kenyan_tax_info(topic)
        return TaxAdviceResponse(topic=topic, matched_topic=matched, information=information)
