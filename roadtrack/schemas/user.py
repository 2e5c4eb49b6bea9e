"""User and authentication schemas."""
from pydantic import EmailStr, Field

from roadtrack.models.user import UserRole

from .base import CamelModel, PartialUpdate, UtcDatetime


class AdminCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str


class UserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str
    role: UserRole = UserRole.ENGINEER
    is_active: bool = True


class UserUpdate(PartialUpdate):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    password: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None


class UserRead(CamelModel):
    id: int
    name: str
    email: EmailStr
    role: UserRole
    is_active: bool
    last_login: UtcDatetime | None = None
    created_at: UtcDatetime


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class LoginResponse(CamelModel):
    token: str
    user: UserRead


class ProjectAccessGrant(CamelModel):
    project_id: int
    access_level: str = Field(default="VIEWER", max_length=50)
    is_active: bool = True


class ProjectAccessRead(CamelModel):
    id: int
    user_id: int
    project_id: int
    access_level: str
    is_active: bool


class SetupStatus(CamelModel):
    has_admin: bool
    user_count: int
    project_count: int
