"""
Lógica de negocio del módulo de Contactos
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional, Union
from uuid import UUID
import logging

from app.modules.contacts.crud import ContactCrud
from app.modules.contacts.models import Contact, ContactType
from app.modules.contacts.schemas import (
    CustomerCreate, VendorCreate, ContactUpdate, ContactOut, ContactList
)

logger = logging.getLogger(__name__)

LABELS = {ContactType.CUSTOMER: "Cliente", ContactType.VENDOR: "Proveedor"}


class ContactService:
    """Servicio compartido por los routers de clientes y proveedores"""

    def __init__(self, db: Session, contact_type: ContactType):
        self.db = db
        self.contact_type = contact_type
        self.crud = ContactCrud(db)

    @property
    def label(self) -> str:
        return LABELS[self.contact_type]

    def _check_unique_email(self, email: Optional[str], tenant_id: UUID, exclude_id: Optional[UUID] = None):
        if email and self.crud.get_by_email(email, self.contact_type, tenant_id, exclude_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe un {self.label.lower()} con el email {email}"
            )

    def create_contact(self, contact_data: Union[CustomerCreate, VendorCreate], tenant_id: UUID) -> Contact:
        data = contact_data.model_dump()
        self._check_unique_email(data.get("email"), tenant_id)
        try:
            contact = self.crud.create(data, self.contact_type, tenant_id)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating {self.contact_type.value}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al crear {self.label.lower()}"
            )
        logger.info(f"{self.label} created: {contact.id}")
        return contact

    def get_contact(self, contact_id: UUID, tenant_id: UUID) -> Contact:
        contact = self.crud.get_by_id(contact_id, self.contact_type, tenant_id)
        if not contact:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{self.label} no encontrado")
        return contact

    def list_contacts(self, tenant_id: UUID, limit: int = 100, offset: int = 0,
                      search: Optional[str] = None) -> ContactList:
        contacts, total = self.crud.get_many(tenant_id, self.contact_type, limit, offset, search)
        return ContactList(
            contacts=[ContactOut.model_validate(c) for c in contacts],
            total=total,
            limit=limit,
            offset=offset
        )

    def update_contact(self, contact_id: UUID, update_data: ContactUpdate, tenant_id: UUID) -> Contact:
        contact = self.get_contact(contact_id, tenant_id)
        data = update_data.model_dump(exclude_unset=True)

        if "name" in data and not (data["name"] or "").strip():
            data.pop("name")
        if "email" in data:
            if data["email"] is None and self.contact_type == ContactType.CUSTOMER:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="El email es requerido para clientes"
                )
            self._check_unique_email(data["email"], tenant_id, exclude_id=contact.id)

        return self.crud.update(contact, data)

    def delete_contact(self, contact_id: UUID, tenant_id: UUID) -> None:
        """Soft delete: las facturas conservan nombre e id del cliente"""
        contact = self.get_contact(contact_id, tenant_id)
        self.crud.soft_delete(contact)
        logger.info(f"{self.label} soft-deleted: {contact.id}")

    def restore_contact(self, contact_id: UUID, tenant_id: UUID) -> Contact:
        contact = self.crud.get_by_id(contact_id, self.contact_type, tenant_id, include_deleted=True)
        if not contact:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{self.label} no encontrado")
        if not contact.is_deleted:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"El {self.label.lower()} no está eliminado")
        self._check_unique_email(contact.email, tenant_id, exclude_id=contact.id)
        return self.crud.restore(contact)


def get_customer(db: Session, customer_id: UUID, tenant_id: UUID) -> Contact:
    """Cliente activo del tenant (usado por facturas)"""
    return ContactService(db, ContactType.CUSTOMER).get_contact(customer_id, tenant_id)
