from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from uuid import UUID

from app.modules.bank_accounts.models import BankAccount
from app.modules.bank_accounts.schemas import (
    BankAccountCreate, BankAccountUpdate, BankAccountOut, BankAccountList, BankAccountBalance
)
from app.modules.transactions.models import Transaction
from app.common.utils import to_money, utcnow


class BankAccountService:
    def __init__(self, db: Session):
        self.db = db

    def get_bank_account(self, bank_account_id: UUID, tenant_id: UUID) -> BankAccount:
        bank_account = self.db.query(BankAccount).filter(
            BankAccount.id == bank_account_id,
            BankAccount.tenant_id == tenant_id,
            BankAccount.deleted_at.is_(None)
        ).first()
        if not bank_account:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cuenta bancaria no encontrada")
        return bank_account

    def create_bank_account(self, data: BankAccountCreate, tenant_id: UUID) -> BankAccount:
        bank_account = BankAccount(tenant_id=tenant_id, **data.model_dump())
        self.db.add(bank_account)
        self.db.commit()
        self.db.refresh(bank_account)
        return bank_account

    def list_bank_accounts(self, tenant_id: UUID) -> BankAccountList:
        accounts = self.db.query(BankAccount).filter(
            BankAccount.tenant_id == tenant_id,
            BankAccount.deleted_at.is_(None)
        ).order_by(BankAccount.account_name).all()
        return BankAccountList(
            bank_accounts=[BankAccountOut.model_validate(a) for a in accounts],
            total=len(accounts)
        )

    def update_bank_account(self, bank_account_id: UUID, data: BankAccountUpdate, tenant_id: UUID) -> BankAccount:
        bank_account = self.get_bank_account(bank_account_id, tenant_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(bank_account, field, value)
        self.db.commit()
        self.db.refresh(bank_account)
        return bank_account

    def delete_bank_account(self, bank_account_id: UUID, tenant_id: UUID) -> None:
        """Soft delete; las transacciones vinculadas conservan la referencia"""
        bank_account = self.get_bank_account(bank_account_id, tenant_id)
        bank_account.deleted_at = utcnow()
        self.db.commit()

    def get_balance(self, bank_account_id: UUID, tenant_id: UUID) -> BankAccountBalance:
        """Saldo = suma de montos con signo de las transacciones vinculadas"""
        bank_account = self.get_bank_account(bank_account_id, tenant_id)
        total, count = self.db.query(
            func.coalesce(func.sum(Transaction.amount), 0),
            func.count(Transaction.id)
        ).filter(
            Transaction.tenant_id == tenant_id,
            Transaction.bank_account_id == bank_account.id,
            Transaction.deleted_at.is_(None)
        ).one()
        return BankAccountBalance(
            bank_account_id=bank_account.id,
            account_name=bank_account.account_name,
            balance=to_money(total),
            transaction_count=count
        )
