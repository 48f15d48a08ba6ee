from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.database.database import get_db
from app.modules.auth.service import AuthService
from app.modules.auth.dependencies import (
    get_current_user, get_auth_context, require_owner_or_admin, require_any_role
)
from app.modules.auth.models import User
from app.modules.auth.schemas import (
    AuthContext, MeResponse, UserOut, UserUpdate,
    TeamMemberCreate, TeamMemberUpdate, TeamMemberOut, TeamMemberList
)

auth_router = APIRouter()
team_router = APIRouter(prefix="/team", tags=["Team"])


@auth_router.get("/me", response_model=MeResponse)
def read_me(
    current_user: User = Depends(get_current_user),
    auth_context: AuthContext = Depends(get_auth_context)
):
    """Usuario autenticado con el tenant y rol resueltos."""
    return MeResponse(
        user=UserOut.model_validate(current_user),
        tenant_id=auth_context.tenant_id,
        role=auth_context.user_role
    )


@auth_router.patch("/me", response_model=UserOut)
def update_me(
    update_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Actualizar perfil (nombre, avatar)."""
    return AuthService(db).update_profile(current_user.id, update_data)


@team_router.get("/", response_model=TeamMemberList)
def list_team(
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(require_any_role())
):
    """Listar miembros del equipo del tenant."""
    return AuthService(db).list_team(auth_context.tenant_id)


@team_router.post("/", response_model=TeamMemberOut, status_code=status.HTTP_201_CREATED)
def invite_member(
    member_data: TeamMemberCreate,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(require_owner_or_admin())
):
    """
    Invitar a un miembro del equipo

    Solo propietarios y administradores pueden invitar. El rol owner no es asignable.
    """
    return AuthService(db).invite_member(member_data, auth_context.tenant_id, auth_context.email)


@team_router.patch("/{member_id}", response_model=TeamMemberOut)
def update_member(
    member_id: UUID,
    update_data: TeamMemberUpdate,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(require_owner_or_admin())
):
    """Cambiar rol o activar/desactivar un miembro."""
    return AuthService(db).update_member(member_id, update_data, auth_context.tenant_id)


@team_router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    member_id: UUID,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(require_owner_or_admin())
):
    """Eliminar un miembro del equipo."""
    AuthService(db).remove_member(member_id, auth_context.tenant_id)
