"""Pydantic schemas for Auth API."""

from pydantic import BaseModel, EmailStr, Field

from api.v1.schemas.common import PHONE_PATTERN
from api.v1.schemas.profile import ProfileResponse
from domain.entities.profile import Role


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    confirm_password: str = Field(..., min_length=1, max_length=128)
    role: Role
    contact_name: str = Field(..., min_length=2, max_length=100)
    phone_number: str = Field(..., min_length=10, max_length=30, pattern=PHONE_PATTERN)


class LoginRequest(BaseModel):
    """Schema for email/password sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class ChangePasswordRequest(BaseModel):
    """Schema for changing the signed-in user's password."""

    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=1, max_length=128)
    confirm_new_password: str = Field(..., min_length=1, max_length=128)


class PasswordStrengthRequest(BaseModel):
    password: str = Field(..., max_length=128)


class PasswordStrengthResponse(BaseModel):
    """Strength meter result: 20 points per satisfied criterion."""

    criteria: dict[str, bool]
    score: int
    label: str


class SessionData(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    profile: ProfileResponse


class LoginResponse(BaseModel):
    """Response for a successful sign-in."""

    data: SessionData
