from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.accounts.service import AccountService
from app.modules.accounts.models import AccountType
from app.modules.accounts.schemas import (
    AccountCreate, AccountUpdate, AccountOut, AccountList, SeedResult
)

accounts_router = APIRouter(prefix="/accounts", tags=["Chart of Accounts"])


@accounts_router.post("/", response_model=AccountOut, status_code=status.HTTP_201_CREATED)
def create_account(
    account_data: AccountCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    """Crear una cuenta en el plan de cuentas"""
    return AccountService(db).create_account(account_data, auth_context.tenant_id)


@accounts_router.get("/", response_model=AccountList)
def list_accounts(
    type: Optional[AccountType] = Query(None, description="Filtrar por tipo de cuenta"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    """Listar cuentas ordenadas por tipo y nombre"""
    return AccountService(db).list_accounts(auth_context.tenant_id, type)


@accounts_router.post("/seed-defaults", response_model=SeedResult)
def seed_default_accounts(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_owner_or_admin())
):
    """
    Crear el plan de cuentas por defecto

    Las cuentas que ya existen (por nombre) se omiten.
    """
    return AccountService(db).seed_default_accounts(auth_context.tenant_id)


@accounts_router.get("/{account_id}", response_model=AccountOut)
def get_account(
    account_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_any_role())
):
    return AccountService(db).get_account(account_id, auth_context.tenant_id)


@accounts_router.patch("/{account_id}", response_model=AccountOut)
def update_account(
    account_id: UUID,
    update_data: AccountUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_writer())
):
    """Actualizar cuenta (renombrar re-asigna sus transacciones)"""
    return AccountService(db).update_account(account_id, update_data, auth_context.tenant_id)


@accounts_router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    account_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_owner_or_admin())
):
    """Eliminar cuenta sin transacciones asociadas"""
    AccountService(db).delete_account(account_id, auth_context.tenant_id)
