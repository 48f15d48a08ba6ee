from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import or_, func
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from decimal import Decimal
import logging

from app.modules.transactions.models import Transaction, TransactionType, UNCATEGORIZED, signed_amount
from app.modules.transactions.schemas import (
    TransactionCreate, TransactionUpdate, TransactionOut, TransactionList, CategorizeResponse
)
from app.modules.bank_accounts.models import BankAccount
from app.modules.projects.models import Project
from app.modules.accounts.models import Account
from app.modules.pos.models import Sale
from app.modules.invoices.models import Invoice
from app.modules.payroll.models import PayrollRun
from app.modules.assistant.client import AIClient
from app.modules.assistant.schemas import CategoryExample, ReceiptData
from app.modules.assistant import flows
from app.common.utils import to_money, utcnow, as_utc

logger = logging.getLogger(__name__)

CATEGORIZATION_EXAMPLES = 10


class TransactionService:
    """Servicio del libro de transacciones"""

    def __init__(self, db: Session):
        self.db = db

    def _validate_links(self, tenant_id: UUID, bank_account_id: Optional[UUID], project_id: Optional[UUID]):
        if bank_account_id:
            exists = self.db.query(BankAccount.id).filter(
                BankAccount.id == bank_account_id,
                BankAccount.tenant_id == tenant_id,
                BankAccount.deleted_at.is_(None)
            ).first()
            if not exists:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cuenta bancaria no encontrada")
        if project_id:
            exists = self.db.query(Project.id).filter(
                Project.id == project_id,
                Project.tenant_id == tenant_id,
                Project.deleted_at.is_(None)
            ).first()
            if not exists:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Proyecto no encontrado")

    def record(
        self,
        tenant_id: UUID,
        description: str,
        amount: Decimal,
        transaction_type: TransactionType,
        account: str = UNCATEGORIZED,
        date: Optional[datetime] = None,
        project_id: Optional[UUID] = None,
        bank_account_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Agregar un movimiento a la sesión sin confirmar.

        Lo usan POS, facturas y nómina para que el movimiento quede en la
        misma transacción de base de datos que la operación que lo origina.
        """
        transaction = Transaction(
            tenant_id=tenant_id,
            date=as_utc(date) if date else utcnow(),
            description=description,
            amount=signed_amount(to_money(amount), transaction_type),
            type=transaction_type,
            account=account or UNCATEGORIZED,
            project_id=project_id,
            bank_account_id=bank_account_id,
        )
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def create_transaction(self, data: TransactionCreate, tenant_id: UUID) -> Transaction:
        self._validate_links(tenant_id, data.bank_account_id, data.project_id)
        try:
            transaction = self.record(
                tenant_id=tenant_id,
                description=data.description,
                amount=data.amount,
                transaction_type=data.type,
                account=data.account,
                date=data.date,
                project_id=data.project_id,
                bank_account_id=data.bank_account_id,
            )
            transaction.vendor_name = data.vendor_name
            transaction.notes = data.notes
            self.db.commit()
            self.db.refresh(transaction)
            return transaction
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating transaction: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error al registrar la transacción"
            )

    def get_transaction(self, transaction_id: UUID, tenant_id: UUID) -> Transaction:
        transaction = self.db.query(Transaction).filter(
            Transaction.id == transaction_id,
            Transaction.tenant_id == tenant_id,
            Transaction.deleted_at.is_(None)
        ).first()
        if not transaction:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transacción no encontrada")
        return transaction

    def list_transactions(
        self,
        tenant_id: UUID,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        account: Optional[str] = None,
        project_id: Optional[UUID] = None,
        bank_account_id: Optional[UUID] = None,
        transaction_type: Optional[TransactionType] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> TransactionList:
        """Listar transacciones con filtros, de la más reciente a la más antigua"""
        query = self.db.query(Transaction).filter(
            Transaction.tenant_id == tenant_id,
            Transaction.deleted_at.is_(None)
        )

        if start_date:
            query = query.filter(Transaction.date >= as_utc(start_date))
        if end_date:
            query = query.filter(Transaction.date <= as_utc(end_date))
        if account:
            query = query.filter(func.lower(Transaction.account) == account.strip().lower())
        if project_id:
            query = query.filter(Transaction.project_id == project_id)
        if bank_account_id:
            query = query.filter(Transaction.bank_account_id == bank_account_id)
        if transaction_type:
            query = query.filter(Transaction.type == transaction_type)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Transaction.description.ilike(pattern),
                Transaction.account.ilike(pattern),
                Transaction.vendor_name.ilike(pattern)
            ))

        total = query.count()
        transactions = query.order_by(Transaction.date.desc(), Transaction.created_at.desc()) \
            .offset(offset).limit(limit).all()

        return TransactionList(
            transactions=[TransactionOut.model_validate(t) for t in transactions],
            total=total,
            limit=limit,
            offset=offset
        )

    def update_transaction(self, transaction_id: UUID, data: TransactionUpdate, tenant_id: UUID) -> Transaction:
        """Actualizar; el signo del monto se recalcula con el tipo resultante"""
        transaction = self.get_transaction(transaction_id, tenant_id)
        changes = data.model_dump(exclude_unset=True)
        self._validate_links(tenant_id, changes.get("bank_account_id"), changes.get("project_id"))

        amount = changes.pop("amount", None)
        new_type = changes.pop("type", None) or transaction.type
        if "date" in changes and changes["date"] is not None:
            changes["date"] = as_utc(changes["date"])
        if "account" in changes and changes["account"] is None:
            changes["account"] = UNCATEGORIZED

        for field, value in changes.items():
            setattr(transaction, field, value)

        transaction.type = new_type
        transaction.amount = signed_amount(to_money(amount if amount is not None else transaction.amount), new_type)

        self.db.commit()
        self.db.refresh(transaction)
        return transaction

    def update_account(self, transaction_id: UUID, account: str, tenant_id: UUID) -> Transaction:
        transaction = self.get_transaction(transaction_id, tenant_id)
        transaction.account = account
        self.db.commit()
        self.db.refresh(transaction)
        return transaction

    def delete_transaction(self, transaction_id: UUID, tenant_id: UUID) -> None:
        """
        Eliminar una transacción del libro.

        Las transacciones generadas por una venta POS, el pago de una factura
        o una corrida de nómina no se pueden eliminar (409).
        """
        transaction = self.get_transaction(transaction_id, tenant_id)

        for model, label in (
            (Sale, "una venta POS"),
            (Invoice, "el pago de una factura"),
            (PayrollRun, "una corrida de nómina"),
        ):
            linked = self.db.query(model.id).filter(
                model.transaction_id == transaction.id
            ).first()
            if linked:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"La transacción está asociada a {label} y no se puede eliminar"
                )

        try:
            self.db.delete(transaction)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting transaction {transaction_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando la transacción"
            )

    def recent_categorized(self, tenant_id: UUID, exclude_id: Optional[UUID] = None,
                           limit: int = CATEGORIZATION_EXAMPLES) -> List[CategoryExample]:
        query = self.db.query(Transaction).filter(
            Transaction.tenant_id == tenant_id,
            Transaction.deleted_at.is_(None),
            Transaction.account != UNCATEGORIZED
        )
        if exclude_id:
            query = query.filter(Transaction.id != exclude_id)
        rows = query.order_by(Transaction.date.desc()).limit(limit).all()
        return [CategoryExample(description=t.description, category=t.account) for t in rows]

    def categorize(self, transaction_id: UUID, tenant_id: UUID, ai_client: AIClient,
                   apply: bool = False) -> CategorizeResponse:
        """
        Sugerir la cuenta de una transacción con IA.

        Usa como ejemplos las últimas transacciones ya categorizadas del tenant.
        Con `apply` la categoría sugerida se guarda en la transacción.
        """
        transaction = self.get_transaction(transaction_id, tenant_id)
        examples = self.recent_categorized(tenant_id, exclude_id=transaction.id)
        account_names = [name for (name,) in self.db.query(Account.name).filter(
            Account.tenant_id == tenant_id,
            Account.deleted_at.is_(None)
        ).order_by(Account.name).all()]

        result = flows.categorize_transaction(ai_client, transaction.description, examples, account_names)
        category = result.category.strip()[:120]

        if apply:
            transaction.account = category
            self.db.commit()
            logger.info(f"Transaction {transaction.id} categorized as '{category}' ({result.confidence:.2f})")

        return CategorizeResponse(
            transaction_id=transaction.id,
            category=category,
            confidence=result.confidence,
            applied=apply
        )

    @staticmethod
    def analyze_receipt(image_data_uri: str, ai_client: AIClient) -> ReceiptData:
        """Extraer datos del recibo; no persiste nada"""
        if not flows.is_image_data_uri(image_data_uri):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La imagen debe ser un data URI con tipo image/* en base64"
            )
        return flows.analyze_receipt(ai_client, image_data_uri)
