from fastapi import APIRouter, Depends, Query, UploadFile, File, Form, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import datetime
import logging

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.transactions.service import TransactionService
from app.modules.transactions.models import TransactionType
from app.modules.transactions.schemas import (
    TransactionCreate, TransactionUpdate, TransactionAccountUpdate,
    TransactionOut, TransactionList, CategorizeResponse
)
from app.modules.assistant.client import AIClient, get_ai_client
from app.modules.assistant.schemas import ReceiptData
from app.modules.assistant.flows import to_data_uri

logger = logging.getLogger(__name__)

transactions_router = APIRouter(prefix="/transactions", tags=["Transactions"])

MAX_RECEIPT_SIZE = 10 * 1024 * 1024  # 10MB


@transactions_router.post("/", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(
    data: TransactionCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    """
    Registrar una transacción

    El monto se guarda positivo para Income y negativo para Expense,
    sin importar el signo enviado.
    """
    return TransactionService(db).create_transaction(data, auth_context.tenant_id)


@transactions_router.get("/", response_model=TransactionList)
def list_transactions(
    start_date: Optional[datetime] = Query(None, description="Desde (inclusive)"),
    end_date: Optional[datetime] = Query(None, description="Hasta (inclusive)"),
    account: Optional[str] = Query(None, description="Nombre de la cuenta"),
    project_id: Optional[UUID] = Query(None),
    bank_account_id: Optional[UUID] = Query(None),
    type: Optional[TransactionType] = Query(None),
    search: Optional[str] = Query(None, description="Buscar en descripción, cuenta o proveedor"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return TransactionService(db).list_transactions(
        tenant_id=auth_context.tenant_id,
        start_date=start_date,
        end_date=end_date,
        account=account,
        project_id=project_id,
        bank_account_id=bank_account_id,
        transaction_type=type,
        search=search,
        limit=limit,
        offset=offset
    )


@transactions_router.post("/analyze-receipt", response_model=ReceiptData)
async def analyze_receipt(
    file: Optional[UploadFile] = File(None, description="Foto del recibo"),
    image: Optional[str] = Form(None, description="Data URI base64 de la imagen"),
    auth_context = Depends(AuthDependencies.require_writer()),
    ai_client: AIClient = Depends(get_ai_client)
):
    """
    Analizar un recibo con IA

    Acepta un archivo de imagen o un data URI. Devuelve proveedor, fecha,
    descripción y total para pre-llenar una transacción; no guarda nada.
    """
    if file is not None:
        content = await file.read()
        if len(content) > MAX_RECEIPT_SIZE:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="La imagen excede el tamaño máximo de 10MB"
            )
        image = to_data_uri(content, file.content_type or "application/octet-stream")
    if not image:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Se requiere una imagen del recibo")

    return TransactionService.analyze_receipt(image, ai_client)


@transactions_router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(
    transaction_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return TransactionService(db).get_transaction(transaction_id, auth_context.tenant_id)


@transactions_router.patch("/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: UUID,
    data: TransactionUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return TransactionService(db).update_transaction(transaction_id, data, auth_context.tenant_id)


@transactions_router.patch("/{transaction_id}/account", response_model=TransactionOut)
def update_transaction_account(
    transaction_id: UUID,
    data: TransactionAccountUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    """Re-categorizar una transacción"""
    return TransactionService(db).update_account(transaction_id, data.account, auth_context.tenant_id)


@transactions_router.post("/{transaction_id}/categorize", response_model=CategorizeResponse)
def categorize_transaction(
    transaction_id: UUID,
    apply: bool = Query(False, description="Guardar la categoría sugerida"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer()),
    ai_client: AIClient = Depends(get_ai_client)
):
    """Sugerir categoría con IA a partir de las transacciones ya categorizadas"""
    return TransactionService(db).categorize(transaction_id, auth_context.tenant_id, ai_client, apply)


@transactions_router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    TransactionService(db).delete_transaction(transaction_id, auth_context.tenant_id)
