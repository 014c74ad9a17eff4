"""DTOs for parishes, wards, families and domain profiles (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ParishCreate:
    name: str
    diocese: str | None = None
    city: str | None = None
    country: str | None = None
    email: str | None = None
    phone: str | None = None
    timezone: str = "UTC"


@dataclass(frozen=True)
class ParishResult:
    id: str
    name: str
    diocese: str | None
    city: str | None
    country: str | None
    email: str | None
    phone: str | None
    timezone: str
    status: str


@dataclass(frozen=True)
class WardResult:
    id: str
    parish_id: str
    name: str
    ward_number: str | None
    total_families: int
    total_members: int
    status: str


@dataclass(frozen=True)
class FamilyResult:
    id: str
    parish_id: str
    ward_id: str | None
    family_name: str
    primary_contact_id: str | None
    home_phone: str | None
    status: str


@dataclass(frozen=True)
class ParishionerProfile:
    """Profile fields for a parishioner; parish_id is taken from the account."""

    ward_id: str | None = None
    family_id: str | None = None
    middle_name: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    occupation: str | None = None
    member_status: str = "active"
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    postal_code: str | None = None


@dataclass(frozen=True)
class ChurchAdminProfile:
    role_title: str | None = None
    department: str | None = None
    is_primary_admin: bool = False


@dataclass(frozen=True)
class ParishionerResult:
    id: str
    account_id: str
    parish_id: str
    ward_id: str | None
    family_id: str | None
    member_status: str
    status: str


@dataclass(frozen=True)
class ChurchAdminResult:
    id: str
    account_id: str
    parish_id: str
    role_title: str | None
    department: str | None
    is_primary_admin: bool
    status: str
