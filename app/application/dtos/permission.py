"""DTOs for permission use cases (no dependency on ORM)."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model (catalog entry or resolved effective permission)."""

    id: str
    code: str
    name: str
    module: str
    action: str
    description: str | None
    status: str = "active"


@dataclass(frozen=True)
class PermissionModule:
    """Permissions grouped by module (GET /permissions/modules)."""

    module: str
    permissions: list[PermissionResult] = field(default_factory=list)
