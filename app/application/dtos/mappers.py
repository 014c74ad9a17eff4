"""Row -> DTO mappers.

Take any object exposing the persistence attributes (ORM row or test
double), so the application layer can build read-models without importing
infrastructure.
"""

from typing import Any

from app.application.dtos.account import AccountResult
from app.application.dtos.parish import (
    ChurchAdminResult,
    FamilyResult,
    ParishResult,
    ParishionerResult,
    WardResult,
)
from app.application.dtos.permission import PermissionResult


def permission_to_result(p: Any) -> PermissionResult:
    return PermissionResult(
        id=p.id,
        code=p.code,
        name=p.name,
        module=p.module,
        action=p.action,
        description=p.description,
        status=p.status,
    )


def account_to_result(a: Any) -> AccountResult:
    """Build AccountResult from an account row (no password)."""
    return AccountResult(
        id=a.id,
        email=a.email,
        first_name=a.first_name,
        last_name=a.last_name,
        phone=a.phone,
        kind=a.kind,
        parish_id=a.parish_id,
        is_tenant_admin=bool(a.is_tenant_admin),
        status=a.status,
    )


def parish_to_result(p: Any) -> ParishResult:
    return ParishResult(
        id=p.id,
        name=p.name,
        diocese=p.diocese,
        city=p.city,
        country=p.country,
        email=p.email,
        phone=p.phone,
        timezone=p.timezone,
        status=p.status,
    )


def ward_to_result(w: Any) -> WardResult:
    return WardResult(
        id=w.id,
        parish_id=w.parish_id,
        name=w.name,
        ward_number=w.ward_number,
        total_families=w.total_families,
        total_members=w.total_members,
        status=w.status,
    )


def family_to_result(f: Any) -> FamilyResult:
    return FamilyResult(
        id=f.id,
        parish_id=f.parish_id,
        ward_id=f.ward_id,
        family_name=f.family_name,
        primary_contact_id=f.primary_contact_id,
        home_phone=f.home_phone,
        status=f.status,
    )


def parishioner_to_result(p: Any) -> ParishionerResult:
    return ParishionerResult(
        id=p.id,
        account_id=p.account_id,
        parish_id=p.parish_id,
        ward_id=p.ward_id,
        family_id=p.family_id,
        member_status=p.member_status,
        status=p.status,
    )


def church_admin_to_result(c: Any) -> ChurchAdminResult:
    return ChurchAdminResult(
        id=c.id,
        account_id=c.account_id,
        parish_id=c.parish_id,
        role_title=c.role_title,
        department=c.department,
        is_primary_admin=c.is_primary_admin,
        status=c.status,
    )
