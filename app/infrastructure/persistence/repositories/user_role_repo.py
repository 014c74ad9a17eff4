"""UserRole repository: account-role assignments (single entity responsibility).

One row per (user, role); re-assignment updates the existing row.
"""

from datetime import datetime

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import RecordStatus
from app.domain.exceptions import DuplicateAssignmentException
from app.infrastructure.persistence.models.permission import UserRole
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.repositories.base import is_unique_violation
from app.shared.utils.datetime import utc_now


class UserRoleRepository:
    """User-role link table only. Assign/remove and list roles for a user."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_edge(self, user_id: str, role_id: str) -> UserRole | None:
        result = await self.db.execute(
            select(UserRole).where(
                UserRole.user_id == user_id, UserRole.role_id == role_id
            )
        )
        return result.scalar_one_or_none()

    async def get_user_roles(
        self, user_id: str, at: datetime | None = None
    ) -> list[tuple[UserRole, Role]]:
        """Active, unexpired edges on active roles, highest role priority first."""
        now = at or utc_now()
        result = await self.db.execute(
            select(UserRole, Role)
            .join(Role, Role.id == UserRole.role_id)
            .where(
                UserRole.user_id == user_id,
                UserRole.status == RecordStatus.ACTIVE.value,
                Role.status == RecordStatus.ACTIVE.value,
                or_(UserRole.expires_at.is_(None), UserRole.expires_at > now),
            )
            .order_by(Role.priority.desc(), Role.name)
        )
        return [(ur, role) for ur, role in result.all()]

    async def add(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> UserRole:
        ur = UserRole(
            user_id=user_id,
            role_id=role_id,
            assigned_by=assigned_by,
            assigned_at=utc_now(),
            expires_at=expires_at,
            status=RecordStatus.ACTIVE.value,
        )
        try:
            self.db.add(ur)
            await self.db.flush()
            await self.db.refresh(ur)
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            raise DuplicateAssignmentException(
                "Role already assigned to user",
                assignment_type="user_role",
                details_extra={"user_id": user_id, "role_id": role_id},
            ) from None
        return ur

    async def reactivate(
        self,
        ur: UserRole,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> UserRole:
        """Overwrite a stale edge with fresh assignment metadata."""
        ur.assigned_by = assigned_by
        ur.assigned_at = utc_now()
        ur.expires_at = expires_at
        ur.status = RecordStatus.ACTIVE.value
        await self.db.flush()
        await self.db.refresh(ur)
        return ur

    async def remove(self, user_id: str, role_id: str) -> bool:
        result = await self.db.execute(
            delete(UserRole).where(
                UserRole.user_id == user_id, UserRole.role_id == role_id
            )
        )
        await self.db.flush()
        return (result.rowcount or 0) > 0

    async def remove_all_for_user(self, user_id: str) -> int:
        result = await self.db.execute(delete(UserRole).where(UserRole.user_id == user_id))
        await self.db.flush()
        return result.rowcount or 0

    async def deactivate_expired(self, now: datetime | None = None) -> int:
        """Mark active edges whose expires_at has passed as inactive."""
        now = now or utc_now()
        result = await self.db.execute(
            update(UserRole)
            .where(
                UserRole.status == RecordStatus.ACTIVE.value,
                UserRole.expires_at.is_not(None),
                UserRole.expires_at <= now,
            )
            .values(status=RecordStatus.INACTIVE.value)
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return result.rowcount or 0
