"""Application DTOs (no ORM dependency)."""

from app.application.dtos.account import AccountCreate, AccountResult
from app.application.dtos.assignment import (
    ExpiredAssignmentsResult,
    PermissionOverrideResult,
    UserRoleResult,
)
from app.application.dtos.parish import (
    ChurchAdminProfile,
    ChurchAdminResult,
    FamilyResult,
    ParishCreate,
    ParishResult,
    ParishionerProfile,
    ParishionerResult,
    WardResult,
)
from app.application.dtos.permission import PermissionModule, PermissionResult
from app.application.dtos.provisioning import (
    BulkFamilyResult,
    BulkImportResult,
    CreatedMember,
    FamilySpec,
    ImportRow,
    MemberSpec,
    ParishWithAdminResult,
    ProvisionResult,
    RowError,
    WardSpec,
)
from app.application.dtos.role import RoleCreate, RoleResult, RoleUpdate

__all__ = [
    "AccountCreate",
    "AccountResult",
    "BulkFamilyResult",
    "BulkImportResult",
    "ChurchAdminProfile",
    "ChurchAdminResult",
    "CreatedMember",
    "ExpiredAssignmentsResult",
    "FamilyResult",
    "FamilySpec",
    "ImportRow",
    "MemberSpec",
    "ParishCreate",
    "ParishResult",
    "ParishWithAdminResult",
    "ParishionerProfile",
    "ParishionerResult",
    "PermissionModule",
    "PermissionOverrideResult",
    "PermissionResult",
    "ProvisionResult",
    "RoleCreate",
    "RoleResult",
    "RoleUpdate",
    "UserRoleResult",
    "WardResult",
    "WardSpec",
]
