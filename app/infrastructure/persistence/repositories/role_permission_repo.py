"""RolePermission repository: role-permission bindings (single entity responsibility)."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.mappers import permission_to_result
from app.application.dtos.permission import PermissionResult
from app.domain.exceptions import DuplicateAssignmentException
from app.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
)
from app.infrastructure.persistence.repositories.base import is_unique_violation


class RolePermissionRepository:
    """Role-permission link table only. Bind/unbind and query permissions for a role."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.module, Permission.action)
        )
        return [permission_to_result(p) for p in result.scalars().all()]

    async def get_permission_ids_for_role(self, role_id: str) -> set[str]:
        result = await self.db.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
        )
        return set(result.scalars().all())

    async def bind(
        self, role_id: str, permission_id: str, granted_by: str | None = None
    ) -> RolePermission:
        rp = RolePermission(
            role_id=role_id,
            permission_id=permission_id,
            granted_by=granted_by,
        )
        try:
            self.db.add(rp)
            await self.db.flush()
            await self.db.refresh(rp)
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            raise DuplicateAssignmentException(
                "Permission already assigned to role",
                assignment_type="role_permission",
                details_extra={"role_id": role_id, "permission_id": permission_id},
            ) from None
        return rp

    async def unbind(self, role_id: str, permission_id: str) -> bool:
        result = await self.db.execute(
            select(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        rp = result.scalar_one_or_none()
        if not rp:
            return False
        await self.db.delete(rp)
        await self.db.flush()
        return True
