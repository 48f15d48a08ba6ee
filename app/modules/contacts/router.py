"""
Routers para el módulo de Contactos

/customers y /vendors exponen los mismos endpoints sobre ContactService,
cambiando el tipo de contacto y el esquema de creación.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional, Type
from uuid import UUID

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.contacts.models import ContactType
from app.modules.contacts.service import ContactService
from app.modules.contacts.schemas import (
    CustomerCreate, VendorCreate, ContactUpdate, ContactOut, ContactList
)


def build_contacts_router(prefix: str, tag: str, contact_type: ContactType, create_schema: Type) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag], responses={404: {"description": "Not found"}})

    @router.post("/", response_model=ContactOut, status_code=status.HTTP_201_CREATED)
    def create_contact(
        contact_data: create_schema,
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_writer())
    ):
        return ContactService(db, contact_type).create_contact(contact_data, auth_context.tenant_id)

    @router.get("/", response_model=ContactList)
    def list_contacts(
        limit: int = Query(100, ge=1, le=500, description="Número máximo de contactos a retornar"),
        offset: int = Query(0, ge=0, description="Número de contactos a omitir"),
        search: Optional[str] = Query(None, description="Búsqueda por nombre, email o teléfono"),
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_any_role())
    ):
        return ContactService(db, contact_type).list_contacts(auth_context.tenant_id, limit, offset, search)

    @router.get("/{contact_id}", response_model=ContactOut)
    def get_contact(
        contact_id: UUID,
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_any_role())
    ):
        return ContactService(db, contact_type).get_contact(contact_id, auth_context.tenant_id)

    @router.patch("/{contact_id}", response_model=ContactOut)
    def update_contact(
        contact_id: UUID,
        update_data: ContactUpdate,
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_writer())
    ):
        return ContactService(db, contact_type).update_contact(contact_id, update_data, auth_context.tenant_id)

    @router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_contact(
        contact_id: UUID,
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_writer())
    ):
        ContactService(db, contact_type).delete_contact(contact_id, auth_context.tenant_id)

    @router.post("/{contact_id}/restore", response_model=ContactOut)
    def restore_contact(
        contact_id: UUID,
        db: Session = Depends(get_db),
        auth_context = Depends(AuthDependencies.require_owner_or_admin())
    ):
        return ContactService(db, contact_type).restore_contact(contact_id, auth_context.tenant_id)

    return router


customers_router = build_contacts_router("/customers", "Customers", ContactType.CUSTOMER, CustomerCreate)
vendors_router = build_contacts_router("/vendors", "Vendors", ContactType.VENDOR, VendorCreate)
