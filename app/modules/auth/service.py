from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from app.common.utils import utcnow
from app.modules.auth.models import User, TeamMember
from app.modules.auth.schemas import (
    UserUpdate, TeamMemberCreate, TeamMemberUpdate, TeamMemberList, TeamMemberOut
)

logger = logging.getLogger(__name__)


class AuthService:
    """
    Servicio de perfil de usuario y gestión de equipo por tenant.
    """

    def __init__(self, db: Session):
        self.db = db

    def update_profile(self, user_id: UUID, update_data: UserUpdate) -> User:
        """Actualizar nombre / avatar del usuario autenticado."""
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")

        for field, value in update_data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    # ===== EQUIPO =====

    def _get_member(self, member_id: UUID, tenant_id: UUID) -> TeamMember:
        member = self.db.query(TeamMember).filter(
            TeamMember.id == member_id,
            TeamMember.tenant_id == tenant_id,
            TeamMember.deleted_at.is_(None)
        ).first()
        if not member:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Miembro no encontrado")
        return member

    def list_team(self, tenant_id: UUID) -> TeamMemberList:
        members = self.db.query(TeamMember).filter(
            TeamMember.tenant_id == tenant_id,
            TeamMember.deleted_at.is_(None)
        ).order_by(TeamMember.created_at.asc()).all()
        return TeamMemberList(
            members=[TeamMemberOut.model_validate(m) for m in members],
            total=len(members)
        )

    def invite_member(self, member_data: TeamMemberCreate, tenant_id: UUID, inviter_email: str) -> TeamMember:
        """
        Invitar un miembro por email. Obtiene acceso cuando se autentica
        con ese email y selecciona este tenant.
        """
        if member_data.email == inviter_email.lower():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No puedes invitarte a ti mismo"
            )

        existing = self.db.query(TeamMember).filter(
            TeamMember.tenant_id == tenant_id,
            TeamMember.email == member_data.email
        ).first()
        if existing and existing.deleted_at is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{member_data.email} ya es miembro del equipo"
            )

        role = member_data.role.value
        description = (
            f"{member_data.email} has been invited as a(n) {role}. "
            "They will gain access after signing up."
        )

        try:
            if existing:
                # Reactivar invitación eliminada
                existing.deleted_at = None
                existing.is_active = True
                existing.role = role
                existing.description = description
                member = existing
            else:
                member = TeamMember(
                    tenant_id=tenant_id,
                    email=member_data.email,
                    role=role,
                    description=description
                )
                self.db.add(member)
            self.db.commit()
            self.db.refresh(member)
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{member_data.email} ya es miembro del equipo"
            )

        logger.info(f"Team member {member.email} invited to tenant {tenant_id} as {role}")
        return member

    def update_member(self, member_id: UUID, update_data: TeamMemberUpdate, tenant_id: UUID) -> TeamMember:
        member = self._get_member(member_id, tenant_id)
        if update_data.role is not None:
            member.role = update_data.role.value
        if update_data.is_active is not None:
            member.is_active = update_data.is_active
        self.db.commit()
        self.db.refresh(member)
        return member

    def remove_member(self, member_id: UUID, tenant_id: UUID) -> None:
        member = self._get_member(member_id, tenant_id)
        member.deleted_at = utcnow()
        member.is_active = False
        self.db.commit()
