from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import date

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.invoices.service import InvoiceService
from app.modules.invoices.models import InvoiceStatus
from app.modules.invoices.schemas import (
    InvoiceCreate, InvoiceUpdate, InvoiceOut, InvoiceDetail, InvoiceList, InvoiceSummary
)

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post("/", response_model=InvoiceDetail, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice_data: InvoiceCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    """
    Crear factura en borrador

    - **customer_id**: cliente del tenant; su nombre se copia en la factura
    - **issue_date**: por defecto hoy
    - **due_date**: por defecto fecha de emisión + 30 días
    - **items**: descripción, cantidad y precio unitario (> 0)
    """
    return InvoiceService(db).create_invoice(invoice_data, auth_context.tenant_id)


@router.get("/", response_model=InvoiceList)
def list_invoices(
    status: Optional[InvoiceStatus] = Query(None, description="Filtrar por estado"),
    customer_id: Optional[UUID] = Query(None),
    start_date: Optional[date] = Query(None, description="Emitidas desde"),
    end_date: Optional[date] = Query(None, description="Emitidas hasta"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return InvoiceService(db).list_invoices(
        auth_context.tenant_id, status, customer_id, start_date, end_date, limit, offset
    )


@router.get("/summary", response_model=InvoiceSummary)
def get_invoices_summary(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Conteo y montos por estado, saldo por cobrar"""
    return InvoiceService(db).get_summary(auth_context.tenant_id)


@router.get("/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return InvoiceService(db).get_invoice(invoice_id, auth_context.tenant_id)


@router.patch("/{invoice_id}", response_model=InvoiceDetail)
def update_invoice(
    invoice_id: UUID,
    update_data: InvoiceUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    """Editar una factura en borrador"""
    return InvoiceService(db).update_invoice(invoice_id, update_data, auth_context.tenant_id)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    InvoiceService(db).delete_invoice(invoice_id, auth_context.tenant_id)


@router.post("/{invoice_id}/send", response_model=InvoiceOut)
def send_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return InvoiceService(db).send_invoice(invoice_id, auth_context.tenant_id)


@router.post("/{invoice_id}/mark-paid", response_model=InvoiceOut)
def mark_invoice_paid(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    """Marcar pagada; registra el ingreso en 'Sales Revenue'"""
    return InvoiceService(db).mark_paid(invoice_id, auth_context.tenant_id)


@router.post("/{invoice_id}/void", response_model=InvoiceOut)
def void_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_owner_or_admin())
):
    return InvoiceService(db).void_invoice(invoice_id, auth_context.tenant_id)
