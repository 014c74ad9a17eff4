"""UserPermission repository: direct GRANT/REVOKE overrides.

Rows are keyed by (user, permission, type) so a time-limited REVOKE can
suspend a GRANT without destroying it. The write rules that keep one
effective override per (user, permission) live in AssignmentService.
"""

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import PermissionType, RecordStatus
from app.infrastructure.persistence.models.permission import Permission, UserPermission
from app.shared.utils.datetime import utc_now


class UserPermissionRepository:
    """Override table only. Upsert, remove and list overrides for a user."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_override(
        self, user_id: str, permission_id: str, permission_type: PermissionType
    ) -> UserPermission | None:
        result = await self.db.execute(
            select(UserPermission).where(
                UserPermission.user_id == user_id,
                UserPermission.permission_id == permission_id,
                UserPermission.permission_type == permission_type.value,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> list[tuple[UserPermission, Permission]]:
        result = await self.db.execute(
            select(UserPermission, Permission)
            .join(Permission, Permission.id == UserPermission.permission_id)
            .where(UserPermission.user_id == user_id)
            .order_by(Permission.module, Permission.action, UserPermission.permission_type)
        )
        return [(up, p) for up, p in result.all()]

    async def upsert(
        self,
        user_id: str,
        permission_id: str,
        permission_type: PermissionType,
        *,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
        reason: str | None = None,
    ) -> UserPermission:
        """Insert or overwrite the (user, permission, type) row.

        Expiry, reason, actor and status are all replaced, so repeating a
        call leaves exactly one active row.
        """
        up = await self.get_override(user_id, permission_id, permission_type)
        if up is None:
            up = UserPermission(
                user_id=user_id,
                permission_id=permission_id,
                permission_type=permission_type.value,
            )
            self.db.add(up)
        up.assigned_by = assigned_by
        up.assigned_at = utc_now()
        up.expires_at = expires_at
        up.reason = reason
        up.status = RecordStatus.ACTIVE.value
        await self.db.flush()
        await self.db.refresh(up)
        return up

    async def remove(
        self,
        user_id: str,
        permission_id: str,
        permission_type: PermissionType | None = None,
    ) -> int:
        """Delete overrides for the pair (one type, or both when None)."""
        stmt = delete(UserPermission).where(
            UserPermission.user_id == user_id,
            UserPermission.permission_id == permission_id,
        )
        if permission_type is not None:
            stmt = stmt.where(UserPermission.permission_type == permission_type.value)
        result = await self.db.execute(stmt)
        await self.db.flush()
        return result.rowcount or 0

    async def remove_all_for_user(self, user_id: str) -> int:
        result = await self.db.execute(
            delete(UserPermission).where(UserPermission.user_id == user_id)
        )
        await self.db.flush()
        return result.rowcount or 0

    async def deactivate_expired(self, now: datetime | None = None) -> int:
        now = now or utc_now()
        result = await self.db.execute(
            update(UserPermission)
            .where(
                UserPermission.status == RecordStatus.ACTIVE.value,
                UserPermission.expires_at.is_not(None),
                UserPermission.expires_at <= now,
            )
            .values(status=RecordStatus.INACTIVE.value)
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return result.rowcount or 0
