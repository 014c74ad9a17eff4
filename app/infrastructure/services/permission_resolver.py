"""Resolves effective permissions from DB (implements IPermissionResolver).

Effective set = (permissions bound to the account's active, unexpired roles
UNION active, unexpired GRANT overrides) MINUS active, unexpired REVOKE
overrides, restricted to active catalog entries. The whole set is one
SELECT so a check sees a single consistent snapshot.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.mappers import permission_to_result
from app.application.dtos.permission import PermissionResult
from app.domain.enums import PermissionType, RecordStatus
from app.domain.value_objects.access import EffectiveAccess, Scoped, Unrestricted
from app.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserPermission,
    UserRole,
)
from app.infrastructure.persistence.models.role import Role
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.application.dtos.account import AccountResult

_ACTIVE = RecordStatus.ACTIVE.value


def _effective_permissions_query(user_id: str, now: datetime) -> Select:
    """SELECT of active permissions held by user_id at instant now."""
    role_granted = (
        select(RolePermission.permission_id)
        .join(UserRole, UserRole.role_id == RolePermission.role_id)
        .join(Role, Role.id == UserRole.role_id)
        .where(
            UserRole.user_id == user_id,
            UserRole.status == _ACTIVE,
            Role.status == _ACTIVE,
            or_(UserRole.expires_at.is_(None), UserRole.expires_at > now),
        )
    )

    def _overrides(kind: PermissionType):
        return select(UserPermission.permission_id).where(
            UserPermission.user_id == user_id,
            UserPermission.permission_type == kind.value,
            UserPermission.status == _ACTIVE,
            or_(UserPermission.expires_at.is_(None), UserPermission.expires_at > now),
        )

    return select(Permission).where(
        Permission.status == _ACTIVE,
        or_(
            Permission.id.in_(role_granted),
            Permission.id.in_(_overrides(PermissionType.GRANT)),
        ),
        Permission.id.not_in(_overrides(PermissionType.REVOKE)),
    )


class PermissionResolver:
    """Read-only resolver; safe to construct per request. No caching."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def resolve(
        self, user_id: str, at: datetime | None = None
    ) -> list[PermissionResult]:
        """Return the effective permissions of user_id ordered by module, action."""
        query = _effective_permissions_query(user_id, at or utc_now()).order_by(
            Permission.module, Permission.action
        )
        result = await self.db.execute(query)
        return [permission_to_result(p) for p in result.scalars().all()]

    async def get_user_permissions(
        self, user_id: str, at: datetime | None = None
    ) -> set[str]:
        """Return the set of effective permission codes for user_id."""
        return {p.code for p in await self.resolve(user_id, at)}

    async def check(self, user_id: str, code: str, at: datetime | None = None) -> bool:
        """True if user_id holds code; stops at the first matching row."""
        query = (
            _effective_permissions_query(user_id, at or utc_now())
            .where(Permission.code == code)
            .with_only_columns(Permission.id)
            .limit(1)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none() is not None

    async def catalog(self) -> list[PermissionResult]:
        """Every active permission (what an unrestricted account holds)."""
        result = await self.db.execute(
            select(Permission)
            .where(Permission.status == _ACTIVE)
            .order_by(Permission.module, Permission.action)
        )
        return [permission_to_result(p) for p in result.scalars().all()]

    async def access_for(
        self, account: AccountResult, at: datetime | None = None
    ) -> EffectiveAccess:
        """Unrestricted for tenant administrators, otherwise the resolved codes."""
        if account.is_tenant_admin:
            return Unrestricted()
        return Scoped(frozenset(await self.get_user_permissions(account.id, at)))
