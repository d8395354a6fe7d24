"""Schemas for user administration endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from paharnama.models.user import Role


class UserCreate(BaseModel):
    """Schema for an admin creating a user."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=50)
    first_name: str | None = Field(None, max_length=50)
    last_name: str | None = Field(None, max_length=50)
    phone: str | None = Field(None, max_length=20)
    role: Role = Role.USER
    is_verified: bool = False


class UserUpdate(BaseModel):
    """Schema for an admin updating a user."""

    first_name: str | None = Field(None, max_length=50)
    last_name: str | None = Field(None, max_length=50)
    phone: str | None = Field(None, max_length=20)
    role: Role | None = None
    is_active: bool | None = None
    is_verified: bool | None = None


class UserQuery(BaseModel):
    """Filters and pagination for listing users."""

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    search: str | None = None
    role: Role | None = None
    is_active: bool | None = None
    is_verified: bool | None = None


class UserDetail(BaseModel):
    """Full user record for administrators (never the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    role: Role
    is_verified: bool
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
