"""
Dependencias de autenticación para FastAPI.
"""
from typing import Optional
from uuid import UUID
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import jwt

from app.database.database import get_db
from app.modules.auth.models import User, TeamMember, UserRole
from app.modules.auth.schemas import AuthContext
from app.core.config import settings

# Security scheme
security = HTTPBearer()

ALL_ROLES = [role.value for role in UserRole]


class AuthDependencies:
    """Dependencias de autenticación reutilizables."""

    @staticmethod
    def get_current_user(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        db: Session = Depends(get_db)
    ) -> User:
        """
        Obtener usuario actual desde token JWT.
        """
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No se pudieron validar las credenciales",
            headers={"WWW-Authenticate": "Bearer"},
        )

        try:
            payload = jwt.decode(
                credentials.credentials,
                settings.APP_SECRET_STRING,
                algorithms=[settings.ALGORITHM]
            )
            user_id: Optional[str] = payload.get("sub")
            if user_id is None:
                raise credentials_exception
            user_uuid = UUID(user_id)
        except (jwt.PyJWTError, ValueError):
            raise credentials_exception

        user = db.query(User).filter(User.id == user_uuid).first()
        if user is None or not user.is_active:
            raise credentials_exception

        return user

    @staticmethod
    def get_auth_context(
        request: Request,
        credentials: HTTPAuthorizationCredentials = Depends(security),
        db: Session = Depends(get_db)
    ) -> AuthContext:
        """
        Resolver el tenant de la petición.

        Sin header X-Tenant-ID el tenant es el propio usuario (rol owner).
        Con header, el usuario debe ser miembro activo del equipo de ese tenant.
        """
        user = AuthDependencies.get_current_user(credentials, db)
        tenant_header = request.headers.get("X-Tenant-ID")
        if not tenant_header or tenant_header == str(user.id):
            return AuthContext(
                user_id=user.id,
                email=user.email,
                tenant_id=user.id,
                user_role=UserRole.OWNER.value
            )

        try:
            tenant_id = UUID(tenant_header)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="X-Tenant-ID inválido. Debe ser un UUID"
            )

        membership = db.query(TeamMember).filter(
            TeamMember.tenant_id == tenant_id,
            TeamMember.email == user.email.lower(),
            TeamMember.is_active.is_(True),
            TeamMember.deleted_at.is_(None)
        ).first()

        if not membership:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tienes acceso a este tenant"
            )

        return AuthContext(
            user_id=user.id,
            email=user.email,
            tenant_id=tenant_id,
            user_role=membership.role
        )

    @staticmethod
    def require_role(allowed_roles: list[str]):
        """
        Dependencia para requerir roles específicos.
        """
        def role_checker(auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)):
            if auth_context.user_role not in allowed_roles:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Se requiere uno de estos roles: {', '.join(allowed_roles)}"
                )
            return auth_context
        return role_checker

    @staticmethod
    def require_owner_or_admin():
        """Dependencia para requerir rol de owner o admin."""
        return AuthDependencies.require_role(["owner", "admin"])

    @staticmethod
    def require_writer():
        """Roles que pueden registrar movimientos contables."""
        return AuthDependencies.require_role(["owner", "admin", "accountant"])

    @staticmethod
    def require_any_role():
        """Dependencia que requiere cualquier rol activo en el tenant."""
        return AuthDependencies.require_role(ALL_ROLES)


# Instancias de dependencias
get_current_user = AuthDependencies.get_current_user
get_auth_context = AuthDependencies.get_auth_context
require_owner_or_admin = AuthDependencies.require_owner_or_admin
require_writer = AuthDependencies.require_writer
require_any_role = AuthDependencies.require_any_role
