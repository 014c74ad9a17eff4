"""DTOs for account provisioning and bulk family provisioning."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from app.application.dtos.account import AccountResult
from app.application.dtos.parish import (
    ChurchAdminResult,
    FamilyResult,
    ParishResult,
    ParishionerResult,
    WardResult,
)


@dataclass(frozen=True)
class ProvisionResult:
    """Outcome of a committed provisioning saga.

    temporary_password is set only when the password was generated, so the
    caller can hand it over once.
    """

    account: AccountResult
    profile: ParishionerResult | ChurchAdminResult
    role_code: str
    temporary_password: str | None = None


@dataclass(frozen=True)
class ParishWithAdminResult:
    parish: ParishResult
    admin: ProvisionResult


@dataclass(frozen=True)
class WardSpec:
    """Ward to attach a family to: an existing ward_id, or a ward found or created by number/name."""

    ward_id: str | None = None
    name: str | None = None
    ward_number: str | None = None


@dataclass(frozen=True)
class FamilySpec:
    """Existing family_id, or a family found or created by family_name."""

    family_id: str | None = None
    family_name: str | None = None
    home_phone: str | None = None
    update_ward: bool = False
    update_primary_contact: bool = False


@dataclass(frozen=True)
class MemberSpec:
    first_name: str | None
    last_name: str | None
    email: str | None
    password: str | None = None
    phone: str | None = None
    middle_name: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    occupation: str | None = None
    member_status: str = "active"
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    postal_code: str | None = None
    is_primary_contact: bool = False
    row: int | None = None


@dataclass(frozen=True)
class RowError:
    """A member or row that was skipped in batch mode."""

    row: int | None
    family: str | None
    error: str
    email: str | None = None


@dataclass(frozen=True)
class CreatedMember:
    account: AccountResult
    parishioner: ParishionerResult
    temporary_password: str | None = None


@dataclass(frozen=True)
class BulkFamilyResult:
    family: FamilyResult | None
    ward: WardResult | None
    created_members: list[CreatedMember] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)


@dataclass(frozen=True)
class BulkImportResult:
    families: list[BulkFamilyResult] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)

    @property
    def total_families(self) -> int:
        return sum(1 for f in self.families if f.family is not None)

    @property
    def total_members(self) -> int:
        return sum(len(f.created_members) for f in self.families)

    @property
    def total_errors(self) -> int:
        return len(self.errors) + sum(len(f.errors) for f in self.families)


ImportRow = dict[str, Any]
