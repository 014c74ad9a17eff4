"""Parish, parishioner and provisioning API schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.auth import AccountResponse


class AdminAccountInput(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=32)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    role_title: str | None = Field(default=None, max_length=100)
    department: str | None = Field(default=None, max_length=100)


class ParishCreateRequest(BaseModel):
    """A new parish with its primary administrator."""

    name: str = Field(..., min_length=1, max_length=255)
    diocese: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=32)
    timezone: str = Field(default="UTC", max_length=64)
    admin: AdminAccountInput


class ParishResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    diocese: str | None
    city: str | None
    country: str | None
    email: str | None
    phone: str | None
    timezone: str
    status: str


class ParishionerCreateRequest(BaseModel):
    """Staff-created parishioner; the password is generated when omitted."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=32)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    parish_id: str | None = Field(
        default=None, description="Required for platform administrators; ignored otherwise"
    )
    ward_id: str | None = None
    family_id: str | None = None
    middle_name: str | None = Field(default=None, max_length=100)
    date_of_birth: date | None = None
    gender: str | None = Field(default=None, max_length=16)
    occupation: str | None = Field(default=None, max_length=100)
    address_line1: str | None = Field(default=None, max_length=255)
    address_line2: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)


class ParishionerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    account_id: str
    parish_id: str
    ward_id: str | None
    family_id: str | None
    member_status: str
    status: str


class ChurchAdminResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    account_id: str
    parish_id: str
    role_title: str | None
    department: str | None
    is_primary_admin: bool
    status: str


class ProvisionResponse(BaseModel):
    """A provisioned account. temporary_password is returned once, when generated."""

    model_config = ConfigDict(from_attributes=True)

    account: AccountResponse
    profile: ParishionerResponse | ChurchAdminResponse
    role_code: str
    temporary_password: str | None = None


class ParishWithAdminResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    parish: ParishResponse
    admin: ProvisionResponse
