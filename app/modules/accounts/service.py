from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from typing import Optional
from uuid import UUID
import logging

from app.modules.accounts.models import Account, AccountType, DEFAULT_CHART_OF_ACCOUNTS
from app.modules.accounts.schemas import (
    AccountCreate, AccountUpdate, AccountOut, AccountList, SeedResult
)
from app.modules.transactions.models import Transaction

logger = logging.getLogger(__name__)

# Orden natural de un plan de cuentas
TYPE_ORDER = {t: i for i, t in enumerate(AccountType)}


class AccountService:
    """Servicio para el plan de cuentas del tenant"""

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self, tenant_id: UUID):
        return self.db.query(Account).filter(
            Account.tenant_id == tenant_id,
            Account.deleted_at.is_(None)
        )

    def _find_by_name(self, name: str, tenant_id: UUID) -> Optional[Account]:
        return self._base_query(tenant_id).filter(
            func.lower(Account.name) == name.strip().lower()
        ).first()

    def get_account(self, account_id: UUID, tenant_id: UUID) -> Account:
        account = self._base_query(tenant_id).filter(Account.id == account_id).first()
        if not account:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cuenta no encontrada")
        return account

    def create_account(self, account_data: AccountCreate, tenant_id: UUID) -> Account:
        """Crear cuenta; el nombre es único por tenant sin distinguir mayúsculas"""
        if self._find_by_name(account_data.name, tenant_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe una cuenta con el nombre '{account_data.name}'"
            )

        account = Account(
            tenant_id=tenant_id,
            name=account_data.name,
            description=account_data.description,
            type=account_data.type
        )
        try:
            self.db.add(account)
            self.db.commit()
            self.db.refresh(account)
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe una cuenta con el nombre '{account_data.name}'"
            )
        return account

    def list_accounts(self, tenant_id: UUID, account_type: Optional[AccountType] = None) -> AccountList:
        query = self._base_query(tenant_id)
        if account_type:
            query = query.filter(Account.type == account_type)

        accounts = sorted(query.all(), key=lambda a: (TYPE_ORDER[a.type], a.name.lower()))
        return AccountList(
            accounts=[AccountOut.model_validate(a) for a in accounts],
            total=len(accounts)
        )

    def update_account(self, account_id: UUID, update_data: AccountUpdate, tenant_id: UUID) -> Account:
        """
        Actualizar cuenta. Al renombrar, las transacciones que usaban el
        nombre anterior se actualizan para no quedar huérfanas.
        """
        account = self.get_account(account_id, tenant_id)
        data = update_data.model_dump(exclude_unset=True)

        new_name = data.get("name")
        if new_name is not None:
            new_name = new_name.strip()
            duplicate = self._find_by_name(new_name, tenant_id)
            if duplicate and duplicate.id != account.id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Ya existe una cuenta con el nombre '{new_name}'"
                )
            if new_name != account.name:
                self.db.query(Transaction).filter(
                    Transaction.tenant_id == tenant_id,
                    func.lower(Transaction.account) == account.name.lower()
                ).update({Transaction.account: new_name}, synchronize_session=False)
                account.name = new_name

        if "description" in data:
            account.description = data["description"]
        if data.get("type") is not None:
            account.type = data["type"]

        self.db.commit()
        self.db.refresh(account)
        return account

    def delete_account(self, account_id: UUID, tenant_id: UUID) -> None:
        account = self.get_account(account_id, tenant_id)

        in_use = self.db.query(func.count(Transaction.id)).filter(
            Transaction.tenant_id == tenant_id,
            func.lower(Transaction.account) == account.name.lower(),
            Transaction.deleted_at.is_(None)
        ).scalar()
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"La cuenta '{account.name}' tiene {in_use} transacciones asociadas"
            )

        self.db.delete(account)
        self.db.commit()

    def seed_default_accounts(self, tenant_id: UUID) -> SeedResult:
        """Crear el plan de cuentas por defecto, omitiendo nombres existentes"""
        existing = {a.name.lower() for a in self._base_query(tenant_id).all()}
        created = []
        skipped = 0

        for name, account_type, description in DEFAULT_CHART_OF_ACCOUNTS:
            if name.lower() in existing:
                skipped += 1
                continue
            account = Account(tenant_id=tenant_id, name=name, type=account_type, description=description)
            self.db.add(account)
            created.append(account)

        self.db.commit()
        for account in created:
            self.db.refresh(account)

        logger.info(f"Seeded {len(created)} default accounts for tenant {tenant_id}")
        return SeedResult(
            created=len(created),
            skipped=skipped,
            accounts=[AccountOut.model_validate(a) for a in created]
        )

    def ensure_account(self, name: str, account_type: AccountType, tenant_id: UUID) -> Account:
        """Obtener la cuenta por nombre o crearla (usado por POS, facturas y nómina)"""
        account = self._find_by_name(name, tenant_id)
        if account:
            return account
        account = Account(tenant_id=tenant_id, name=name, type=account_type)
        self.db.add(account)
        self.db.flush()
        return account
