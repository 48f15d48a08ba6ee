from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func
from typing import List, Optional
from uuid import UUID
from datetime import date, timedelta
from decimal import Decimal
import logging

from app.modules.invoices.models import (
    Invoice, InvoiceLineItem, InvoiceSequence, InvoiceStatus, OUTSTANDING_STATUSES
)
from app.modules.invoices.schemas import (
    InvoiceCreate, InvoiceUpdate, InvoiceLineItemCreate, InvoiceOut, InvoiceList,
    InvoiceSummary, InvoiceStatusSummary
)
from app.modules.contacts.service import get_customer
from app.modules.transactions.models import TransactionType
from app.modules.transactions.service import TransactionService
from app.modules.accounts.models import AccountType
from app.modules.accounts.service import AccountService
from app.common.utils import to_money, utcnow
from app.core.config import settings

logger = logging.getLogger(__name__)

SALES_REVENUE_ACCOUNT = "Sales Revenue"

# Transiciones permitidas: acción -> estados de origen
ALLOWED_TRANSITIONS = {
    "send": (InvoiceStatus.DRAFT,),
    "mark_paid": (InvoiceStatus.SENT, InvoiceStatus.OVERDUE),
    "void": (InvoiceStatus.DRAFT, InvoiceStatus.SENT, InvoiceStatus.OVERDUE),
}


class InvoiceService:
    def __init__(self, db: Session):
        self.db = db

    def generate_invoice_number(self, tenant_id: UUID) -> str:
        """Reservar el siguiente número INV-0001 de la secuencia del tenant"""
        sequence = self.db.query(InvoiceSequence).filter(
            InvoiceSequence.tenant_id == tenant_id
        ).with_for_update().first()

        if not sequence:
            sequence = InvoiceSequence(tenant_id=tenant_id, current_number=0, prefix="INV-")
            self.db.add(sequence)
            self.db.flush()

        sequence.current_number += 1
        return f"{sequence.prefix}{sequence.current_number:04d}"

    @staticmethod
    def _build_line_items(items: List[InvoiceLineItemCreate]) -> List[InvoiceLineItem]:
        return [
            InvoiceLineItem(
                position=position,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=to_money(item.quantity * item.unit_price)
            )
            for position, item in enumerate(items)
        ]

    @staticmethod
    def _apply_totals(invoice: Invoice):
        subtotal = sum((Decimal(li.total) for li in invoice.line_items), Decimal("0"))
        invoice.subtotal = to_money(subtotal)
        invoice.tax_amount = Decimal("0.00")  # Facturas sin impuesto por ahora
        invoice.total_amount = to_money(subtotal + invoice.tax_amount)

    def create_invoice(self, invoice_data: InvoiceCreate, tenant_id: UUID) -> Invoice:
        """Crear factura en borrador"""
        customer = get_customer(self.db, invoice_data.customer_id, tenant_id)

        issue_date = invoice_data.issue_date or date.today()
        due_date = invoice_data.due_date or issue_date + timedelta(days=settings.INVOICE_DEFAULT_DUE_DAYS)
        if due_date < issue_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La fecha de vencimiento no puede ser anterior a la fecha de emisión"
            )

        try:
            invoice = Invoice(
                tenant_id=tenant_id,
                customer_id=customer.id,
                customer_name=customer.name,
                invoice_number=self.generate_invoice_number(tenant_id),
                status=InvoiceStatus.DRAFT,
                issue_date=issue_date,
                due_date=due_date,
                notes=invoice_data.notes,
                line_items=self._build_line_items(invoice_data.items)
            )
            self._apply_totals(invoice)

            self.db.add(invoice)
            self.db.commit()
            self.db.refresh(invoice)
            logger.info(f"Invoice {invoice.invoice_number} created for tenant {tenant_id}")
            return invoice

        except HTTPException:
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating invoice: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creando factura"
            )

    def get_invoice(self, invoice_id: UUID, tenant_id: UUID) -> Invoice:
        invoice = self.db.query(Invoice).options(selectinload(Invoice.line_items)).filter(
            Invoice.id == invoice_id,
            Invoice.tenant_id == tenant_id
        ).first()
        if not invoice:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Factura no encontrada")
        return invoice

    def list_invoices(
        self,
        tenant_id: UUID,
        invoice_status: Optional[InvoiceStatus] = None,
        customer_id: Optional[UUID] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
        offset: int = 0
    ) -> InvoiceList:
        query = self.db.query(Invoice).filter(Invoice.tenant_id == tenant_id)

        if invoice_status:
            query = query.filter(Invoice.status == invoice_status)
        if customer_id:
            query = query.filter(Invoice.customer_id == customer_id)
        if start_date:
            query = query.filter(Invoice.issue_date >= start_date)
        if end_date:
            query = query.filter(Invoice.issue_date <= end_date)

        total = query.count()
        invoices = query.order_by(Invoice.issue_date.desc(), Invoice.invoice_number.desc()) \
            .offset(offset).limit(limit).all()

        return InvoiceList(
            invoices=[InvoiceOut.model_validate(i) for i in invoices],
            total=total,
            limit=limit,
            offset=offset
        )

    def _require_draft(self, invoice: Invoice, action: str):
        if invoice.status != InvoiceStatus.DRAFT:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Solo se pueden {action} facturas en borrador (estado actual: {invoice.status.value})"
            )

    def update_invoice(self, invoice_id: UUID, update_data: InvoiceUpdate, tenant_id: UUID) -> Invoice:
        invoice = self.get_invoice(invoice_id, tenant_id)
        self._require_draft(invoice, "editar")
        data = update_data.model_dump(exclude_unset=True)

        if data.get("customer_id"):
            customer = get_customer(self.db, data["customer_id"], tenant_id)
            invoice.customer_id = customer.id
            invoice.customer_name = customer.name

        if data.get("issue_date"):
            invoice.issue_date = data["issue_date"]
        if data.get("due_date"):
            invoice.due_date = data["due_date"]
        if invoice.due_date < invoice.issue_date:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La fecha de vencimiento no puede ser anterior a la fecha de emisión"
            )

        if "notes" in data:
            invoice.notes = data["notes"]
        if update_data.items:
            invoice.line_items = self._build_line_items(update_data.items)
            self._apply_totals(invoice)

        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def delete_invoice(self, invoice_id: UUID, tenant_id: UUID) -> None:
        """Eliminar borrador; el número consumido no se reutiliza"""
        invoice = self.get_invoice(invoice_id, tenant_id)
        self._require_draft(invoice, "eliminar")
        self.db.delete(invoice)
        self.db.commit()

    def _check_transition(self, invoice: Invoice, action: str):
        if invoice.status not in ALLOWED_TRANSITIONS[action]:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Transición no permitida desde el estado {invoice.status.value}"
            )

    def send_invoice(self, invoice_id: UUID, tenant_id: UUID) -> Invoice:
        invoice = self.get_invoice(invoice_id, tenant_id)
        self._check_transition(invoice, "send")
        invoice.status = InvoiceStatus.SENT
        invoice.sent_at = utcnow()
        self.db.commit()
        self.db.refresh(invoice)
        logger.info(f"Invoice {invoice.invoice_number} sent")
        return invoice

    def mark_paid(self, invoice_id: UUID, tenant_id: UUID) -> Invoice:
        """Marcar pagada y registrar el ingreso en 'Sales Revenue' en la misma transacción"""
        invoice = self.get_invoice(invoice_id, tenant_id)
        self._check_transition(invoice, "mark_paid")

        try:
            AccountService(self.db).ensure_account(SALES_REVENUE_ACCOUNT, AccountType.INCOME, tenant_id)
            transaction = TransactionService(self.db).record(
                tenant_id=tenant_id,
                description=f"Payment for invoice {invoice.invoice_number} - {invoice.customer_name}",
                amount=invoice.total_amount,
                transaction_type=TransactionType.INCOME,
                account=SALES_REVENUE_ACCOUNT
            )
            invoice.status = InvoiceStatus.PAID
            invoice.paid_at = utcnow()
            invoice.transaction_id = transaction.id
            self.db.commit()
            self.db.refresh(invoice)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error marking invoice {invoice_id} as paid: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error registrando el pago de la factura"
            )

        logger.info(f"Invoice {invoice.invoice_number} paid ({invoice.total_amount})")
        return invoice

    def void_invoice(self, invoice_id: UUID, tenant_id: UUID) -> Invoice:
        invoice = self.get_invoice(invoice_id, tenant_id)
        self._check_transition(invoice, "void")
        invoice.status = InvoiceStatus.VOID
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def get_summary(self, tenant_id: UUID) -> InvoiceSummary:
        rows = self.db.query(
            Invoice.status,
            func.count(Invoice.id),
            func.coalesce(func.sum(Invoice.total_amount), 0)
        ).filter(Invoice.tenant_id == tenant_id).group_by(Invoice.status).all()

        by_status = {
            s.value: InvoiceStatusSummary(count=0, amount=Decimal("0.00")) for s in InvoiceStatus
        }
        for invoice_status, count, amount in rows:
            by_status[invoice_status.value] = InvoiceStatusSummary(count=count, amount=to_money(amount))

        outstanding = sum((by_status[s.value].amount for s in OUTSTANDING_STATUSES), Decimal("0"))
        return InvoiceSummary(
            by_status=by_status,
            total_invoices=sum(s.count for s in by_status.values()),
            outstanding_amount=to_money(outstanding),
            overdue_amount=by_status[InvoiceStatus.OVERDUE.value].amount,
            paid_amount=by_status[InvoiceStatus.PAID.value].amount
        )


def mark_overdue_invoices(db: Session, today: Optional[date] = None) -> int:
    """Pasar a Overdue las facturas enviadas con vencimiento cumplido (todos los tenants)"""
    today = today or date.today()
    updated = db.query(Invoice).filter(
        Invoice.status == InvoiceStatus.SENT,
        Invoice.due_date < today
    ).update({Invoice.status: InvoiceStatus.OVERDUE}, synchronize_session=False)
    db.commit()
    if updated:
        logger.info(f"Marked {updated} invoices as overdue")
    return updated
