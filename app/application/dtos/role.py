"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RoleResult:
    """Role read-model. tenant_id is None for global roles."""

    id: str
    tenant_id: str | None
    code: str
    name: str
    description: str | None
    priority: int
    is_system_role: bool
    status: str

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def is_global(self) -> bool:
        return self.tenant_id is None


@dataclass(frozen=True)
class RoleCreate:
    """Input for RoleService.create. tenant_id None creates a global role."""

    code: str
    name: str
    description: str | None = None
    priority: int = 0
    tenant_id: str | None = None
    is_system_role: bool = False


@dataclass(frozen=True)
class RoleUpdate:
    """Partial update for a role; None leaves the field unchanged."""

    name: str | None = None
    description: str | None = None
    priority: int | None = None
    status: str | None = None
