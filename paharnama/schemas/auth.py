"""Schemas for authentication endpoints."""

import re

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from paharnama.models.user import Role


def validate_password_strength(v: str) -> str:
    """Shared password validation logic."""
    errors = []
    if not re.search(r"[a-z]", v):
        errors.append("lowercase letter")
    if not re.search(r"[A-Z]", v):
        errors.append("uppercase letter")
    if not re.search(r"\d", v):
        errors.append("number")

    if errors:
        raise ValueError(f"Password must contain at least one: {', '.join(errors)}")
    return v


class RegisterRequest(BaseModel):
    """Schema for user registration."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=50)
    first_name: str | None = Field(None, max_length=50)
    last_name: str | None = Field(None, max_length=50)

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, v: str) -> str:
        return validate_password_strength(v)


class LoginRequest(BaseModel):
    """Schema for user login."""

    email: str
    password: str


class RefreshTokenRequest(BaseModel):
    """Schema for token refresh."""

    refresh_token: str = Field(min_length=1)


class VerifyEmailRequest(BaseModel):
    """Schema for email verification."""

    token: str = Field(min_length=1)


class ResendVerificationRequest(BaseModel):
    """Schema for resending verification email."""

    email: EmailStr


class ChangePasswordRequest(BaseModel):
    """Schema for changing password while logged in."""

    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=50)

    @field_validator("new_password")
    @classmethod
    def check_password_strength(cls, v: str) -> str:
        return validate_password_strength(v)


class UserProfile(BaseModel):
    """Sanitized user profile returned by auth endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: Role
    first_name: str | None = None
    last_name: str | None = None
    is_verified: bool
