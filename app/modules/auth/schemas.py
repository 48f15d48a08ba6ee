from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from enum import Enum


class TeamRole(str, Enum):
    """Roles asignables a miembros del equipo (owner no es asignable)"""
    ADMIN = "admin"
    ACCOUNTANT = "accountant"
    VIEWER = "viewer"


class UserOut(BaseModel):
    id: UUID
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    avatar_url: Optional[str] = Field(None, max_length=500)


class AuthContext(BaseModel):
    user_id: UUID
    email: str
    tenant_id: UUID
    user_role: str


class MeResponse(BaseModel):
    user: UserOut
    tenant_id: UUID
    role: str


class TeamMemberCreate(BaseModel):
    email: EmailStr
    role: TeamRole = TeamRole.VIEWER

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return str(v).strip().lower()


class TeamMemberUpdate(BaseModel):
    role: Optional[TeamRole] = None
    is_active: Optional[bool] = None


class TeamMemberOut(BaseModel):
    id: UUID
    email: str
    role: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TeamMemberList(BaseModel):
    members: List[TeamMemberOut]
    total: int
