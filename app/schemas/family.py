"""Bulk family provisioning API schemas."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.auth import AccountResponse
from app.schemas.parish import ParishionerResponse


class WardInput(BaseModel):
    """Existing ward_id, or a ward found or created by ward_number / name."""

    ward_id: str | None = None
    name: str | None = Field(default=None, max_length=255)
    ward_number: str | None = Field(default=None, max_length=32)


class FamilyInput(BaseModel):
    family_id: str | None = None
    family_name: str | None = Field(default=None, max_length=255)
    home_phone: str | None = Field(default=None, max_length=32)
    update_ward: bool = False
    update_primary_contact: bool = False

    @model_validator(mode="after")
    def id_or_name(self) -> "FamilyInput":
        if not self.family_id and not (self.family_name or "").strip():
            raise ValueError("Either family_id or family_name is required")
        return self


class MemberInput(BaseModel):
    """One family member. Validity (names, e-mail) is checked by the service per policy."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    phone: str | None = Field(default=None, max_length=32)
    middle_name: str | None = Field(default=None, max_length=100)
    date_of_birth: date | None = None
    gender: str | None = Field(default=None, max_length=16)
    occupation: str | None = Field(default=None, max_length=100)
    member_status: str = Field(default="active", max_length=32)
    address_line1: str | None = Field(default=None, max_length=255)
    address_line2: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)
    is_primary_contact: bool = False


class BulkFamilyRequest(BaseModel):
    """Interactive bulk create: all members succeed or nothing is stored."""

    parish_id: str | None = Field(
        default=None, description="Required for platform administrators; ignored otherwise"
    )
    ward: WardInput | None = None
    family: FamilyInput
    members: list[MemberInput] = Field(..., min_length=1)


class BulkImportRequest(BaseModel):
    """CSV-shaped rows (already parsed). Keys follow the CSV header names."""

    parish_id: str | None = None
    rows: list[dict[str, Any]] = Field(..., min_length=1)


class RowErrorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    row: int | None
    family: str | None
    error: str
    email: str | None = None


class WardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    parish_id: str
    name: str
    ward_number: str | None
    total_families: int
    total_members: int
    status: str


class FamilyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    parish_id: str
    ward_id: str | None
    family_name: str
    primary_contact_id: str | None
    home_phone: str | None
    status: str


class CreatedMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account: AccountResponse
    parishioner: ParishionerResponse
    temporary_password: str | None = None


class BulkFamilyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    family: FamilyResponse | None
    ward: WardResponse | None
    created_members: list[CreatedMemberResponse]
    errors: list[RowErrorResponse]


class BulkImportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    families: list[BulkFamilyResponse]
    errors: list[RowErrorResponse]
    total_families: int
    total_members: int
    total_errors: int
