from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.bank_accounts.service import BankAccountService
from app.modules.bank_accounts.schemas import (
    BankAccountCreate, BankAccountUpdate, BankAccountOut, BankAccountList, BankAccountBalance
)

bank_accounts_router = APIRouter(prefix="/bank-accounts", tags=["Bank Accounts"])


@bank_accounts_router.post("/", response_model=BankAccountOut, status_code=status.HTTP_201_CREATED)
def create_bank_account(
    data: BankAccountCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return BankAccountService(db).create_bank_account(data, auth_context.tenant_id)


@bank_accounts_router.get("/", response_model=BankAccountList)
def list_bank_accounts(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return BankAccountService(db).list_bank_accounts(auth_context.tenant_id)


@bank_accounts_router.get("/{bank_account_id}", response_model=BankAccountOut)
def get_bank_account(
    bank_account_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return BankAccountService(db).get_bank_account(bank_account_id, auth_context.tenant_id)


@bank_accounts_router.get("/{bank_account_id}/balance", response_model=BankAccountBalance)
def get_bank_account_balance(
    bank_account_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Saldo calculado a partir de las transacciones vinculadas"""
    return BankAccountService(db).get_balance(bank_account_id, auth_context.tenant_id)


@bank_accounts_router.patch("/{bank_account_id}", response_model=BankAccountOut)
def update_bank_account(
    bank_account_id: UUID,
    data: BankAccountUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    return BankAccountService(db).update_bank_account(bank_account_id, data, auth_context.tenant_id)


@bank_accounts_router.delete("/{bank_account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bank_account(
    bank_account_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_owner_or_admin())
):
    BankAccountService(db).delete_bank_account(bank_account_id, auth_context.tenant_id)
