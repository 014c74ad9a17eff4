"""Auth API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.assignment import UserRoleResponse


class RegisterRequest(BaseModel):
    """Public parishioner registration."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=32)
    parish_id: str = Field(..., min_length=1)
    ward_id: str | None = None
    family_id: str | None = None
    date_of_birth: date | None = None
    gender: str | None = Field(default=None, max_length=16)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class AccountResponse(BaseModel):
    """Account read-model (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None
    kind: str
    parish_id: str | None
    is_tenant_admin: bool
    is_active: bool


class MeResponse(BaseModel):
    """Current account with its roles and effective permission codes."""

    account: AccountResponse
    roles: list[UserRoleResponse]
    permissions: list[str]
    unrestricted: bool = Field(
        default=False, description="True for tenant administrators (full catalog)"
    )
