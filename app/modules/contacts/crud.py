"""
Acceso a datos del módulo de Contactos, scoped por tenant_id
"""

from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional, Tuple
from uuid import UUID

from app.modules.contacts.models import Contact, ContactType


class ContactCrud:
    """Operaciones CRUD para contactos"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, contact_data: dict, contact_type: ContactType, tenant_id: UUID) -> Contact:
        contact = Contact(**contact_data, type=contact_type, tenant_id=tenant_id)
        self.db.add(contact)
        self.db.commit()
        self.db.refresh(contact)
        return contact

    def get_by_id(self, contact_id: UUID, contact_type: ContactType, tenant_id: UUID,
                  include_deleted: bool = False) -> Optional[Contact]:
        query = self.db.query(Contact).filter(
            Contact.id == contact_id,
            Contact.type == contact_type,
            Contact.tenant_id == tenant_id
        )
        if not include_deleted:
            query = query.filter(Contact.deleted_at.is_(None))
        return query.first()

    def get_by_email(self, email: str, contact_type: ContactType, tenant_id: UUID,
                     exclude_id: Optional[UUID] = None) -> Optional[Contact]:
        query = self.db.query(Contact).filter(
            Contact.tenant_id == tenant_id,
            Contact.type == contact_type,
            Contact.email == email.lower(),
            Contact.deleted_at.is_(None)
        )
        if exclude_id:
            query = query.filter(Contact.id != exclude_id)
        return query.first()

    def get_many(
        self,
        tenant_id: UUID,
        contact_type: ContactType,
        limit: int = 100,
        offset: int = 0,
        search: Optional[str] = None
    ) -> Tuple[List[Contact], int]:
        query = self.db.query(Contact).filter(
            Contact.tenant_id == tenant_id,
            Contact.type == contact_type,
            Contact.deleted_at.is_(None)
        )

        if search:
            search_term = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Contact.name.ilike(search_term),
                    Contact.email.ilike(search_term),
                    Contact.phone.ilike(search_term)
                )
            )

        total = query.count()
        contacts = query.order_by(Contact.name).offset(offset).limit(limit).all()
        return contacts, total

    def update(self, contact: Contact, update_data: dict) -> Contact:
        for field, value in update_data.items():
            setattr(contact, field, value)
        self.db.commit()
        self.db.refresh(contact)
        return contact

    def soft_delete(self, contact: Contact) -> Contact:
        contact.soft_delete()
        self.db.commit()
        return contact

    def restore(self, contact: Contact) -> Contact:
        contact.restore()
        self.db.commit()
        self.db.refresh(contact)
        return contact
