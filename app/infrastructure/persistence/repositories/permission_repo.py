"""Permission catalog repository. Permissions are never deleted, only deactivated.

Read methods return PermissionResult (DTO).
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.mappers import permission_to_result
from app.application.dtos.permission import PermissionResult
from app.domain.enums import RecordStatus
from app.infrastructure.persistence.models.permission import Permission
from app.infrastructure.persistence.repositories.base import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    """Global permission catalog."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def get_permission(self, permission_id: str) -> PermissionResult | None:
        row = await self.get_by_id(permission_id)
        return permission_to_result(row) if row else None

    async def get_by_code(self, code: str) -> PermissionResult | None:
        result = await self.db.execute(select(Permission).where(Permission.code == code))
        row = result.scalar_one_or_none()
        return permission_to_result(row) if row else None

    async def list_permissions(
        self, module: str | None = None, *, include_inactive: bool = False
    ) -> list[PermissionResult]:
        """Return catalog entries ordered by module then action."""
        q = select(Permission)
        if module is not None:
            q = q.where(Permission.module == module)
        if not include_inactive:
            q = q.where(Permission.status == RecordStatus.ACTIVE.value)
        result = await self.db.execute(q.order_by(Permission.module, Permission.action))
        return [permission_to_result(p) for p in result.scalars().all()]

    async def create_permission(
        self,
        code: str,
        name: str,
        module: str,
        action: str,
        description: str | None = None,
    ) -> PermissionResult:
        created = await self.create(
            Permission(
                code=code,
                name=name,
                module=module,
                action=action,
                description=description,
                status=RecordStatus.ACTIVE.value,
            )
        )
        return permission_to_result(created)

    async def set_status(
        self, permission_id: str, status: RecordStatus
    ) -> PermissionResult | None:
        """Activate or deactivate a catalog entry; None if it does not exist."""
        row = await self.get_by_id(permission_id)
        if row is None:
            return None
        row.status = status.value
        return permission_to_result(await self.update(row))
