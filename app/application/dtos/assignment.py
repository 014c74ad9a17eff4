"""DTOs for role assignments and direct permission overrides."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserRoleResult:
    """An account-role edge with the role it points to."""

    id: str
    user_id: str
    role_id: str
    role_code: str
    role_name: str
    priority: int
    assigned_by: str | None
    assigned_at: datetime | None
    expires_at: datetime | None
    status: str


@dataclass(frozen=True)
class PermissionOverrideResult:
    """A direct GRANT or REVOKE for one account and one permission."""

    id: str
    user_id: str
    permission_id: str
    permission_code: str
    permission_type: str
    assigned_by: str | None
    assigned_at: datetime | None
    expires_at: datetime | None
    reason: str | None
    status: str


@dataclass(frozen=True)
class ExpiredAssignmentsResult:
    """Counts of rows deactivated by the expiry cleanup."""

    user_roles: int
    user_permissions: int

    @property
    def total(self) -> int:
        return self.user_roles + self.user_permissions
