"""Permission catalog application service: listing, grouping and activation toggling."""

from __future__ import annotations

from itertools import groupby

from app.application.dtos.permission import PermissionModule, PermissionResult
from app.application.interfaces.repositories import IPermissionRepository
from app.domain.enums import RecordStatus
from app.domain.exceptions import ResourceNotFoundException, ValidationException


class PermissionService:
    """Read the catalog and toggle entries. Catalog entries are never deleted."""

    def __init__(self, permission_repo: IPermissionRepository) -> None:
        self._repo = permission_repo

    async def list_permissions(
        self, module: str | None = None, *, include_inactive: bool = False
    ) -> list[PermissionResult]:
        return await self._repo.list_permissions(module, include_inactive=include_inactive)

    async def list_modules(self) -> list[PermissionModule]:
        """Active permissions grouped by module (catalog is ordered by module)."""
        perms = await self._repo.list_permissions()
        return [
            PermissionModule(module=module, permissions=list(items))
            for module, items in groupby(perms, key=lambda p: p.module)
        ]

    async def get_permission(self, permission_id: str) -> PermissionResult:
        perm = await self._repo.get_permission(permission_id)
        if perm is None:
            raise ResourceNotFoundException("permission", permission_id)
        return perm

    async def set_status(self, permission_id: str, status: str) -> PermissionResult:
        """Activate or deactivate a catalog entry.

        Raises:
            ValidationException: status is not 'active' or 'inactive'.
            ResourceNotFoundException: Unknown permission id.
        """
        try:
            new_status = RecordStatus(status)
        except ValueError:
            raise ValidationException(
                f"Invalid status '{status}'. Must be one of: {', '.join(RecordStatus.values())}",
                field="status",
            ) from None
        updated = await self._repo.set_status(permission_id, new_status)
        if updated is None:
            raise ResourceNotFoundException("permission", permission_id)
        return updated
