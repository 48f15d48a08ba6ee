from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.assistant.client import AIClient, get_ai_client
from app.modules.assistant.service import AssistantService
from app.modules.assistant.schemas import (
    AskRequest, AskResponse, QueryRequest, QueryResponse, ChatHistory, ChatHistoryGrouped,
    SuggestionsResponse, TaxAdviceRequest, TaxAdviceResponse
)
from app.modules.assistant import prompts

assistant_router = APIRouter(prefix="/assistant", tags=["AI Assistant"])


@assistant_router.post("/ask", response_model=AskResponse)
def ask_assistant(
    request: AskRequest,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role()),
    ai_client: AIClient = Depends(get_ai_client)
):
    """
    Preguntar al asistente financiero.

    El asistente consulta transacciones, cuentas, clientes y resúmenes del tenant
    mediante herramientas. La pregunta y la respuesta quedan en el historial.
    """
    return AssistantService(db).ask(request.query, auth_context.tenant_id, auth_context.user_id, ai_client)


@assistant_router.post("/query", response_model=QueryResponse)
def query_financial_data(
    request: QueryRequest,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role()),
    ai_client: AIClient = Depends(get_ai_client)
):
    """Responder usando el contexto enviado o, si falta, un resumen del tenant"""
    return AssistantService(db).query(request.query, request.financial_data, auth_context.tenant_id, ai_client)


@assistant_router.get("/history", response_model=ChatHistory)
def get_chat_history(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return AssistantService(db).get_history(auth_context.tenant_id, auth_context.user_id)


@assistant_router.get("/history/grouped", response_model=ChatHistoryGrouped)
def get_grouped_chat_history(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Historial agrupado por día (UTC)"""
    return AssistantService(db).get_grouped_history(auth_context.tenant_id, auth_context.user_id)


@assistant_router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
def clear_chat_history(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    AssistantService(db).clear_history(auth_context.tenant_id, auth_context.user_id)


@assistant_router.post("/tax-advice", response_model=TaxAdviceResponse)
def get_tax_advice(
    request: TaxAdviceRequest,
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Información sobre VAT, Income Tax y Withholding Tax en Kenia"""
    return AssistantService.tax_advice(request.topic)


@assistant_router.get("/suggestions", response_model=SuggestionsResponse)
def get_suggestions(
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return SuggestionsResponse(suggestions=prompts.SUGGESTED_PROMPTS)
