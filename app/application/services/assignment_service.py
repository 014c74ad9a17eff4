"""Assignment store: account-role edges and direct permission overrides.

Role assignment rule (same for every caller): an active, unexpired edge for
the pair is a Conflict; an inactive or expired edge is reactivated with the
new metadata; otherwise a new edge is inserted. SUPER_ADMIN spans every
parish, so only a platform administrator may assign it.

Override rule: one row per (user, permission, type), upserted. A GRANT
removes any REVOKE for the pair. A REVOKE without expiry removes any GRANT;
a REVOKE with expiry only suspends it until the REVOKE lapses.
"""

from __future__ import annotations

import logging
from datetime import datetime

from app.application.dtos.account import AccountResult
from app.application.dtos.assignment import (
    ExpiredAssignmentsResult,
    PermissionOverrideResult,
    UserRoleResult,
)
from app.application.dtos.mappers import account_to_result
from app.application.interfaces.repositories import (
    IAccountRepository,
    IPermissionRepository,
    IRoleRepository,
    IUserPermissionRepository,
    IUserRoleRepository,
)
from app.domain.enums import PermissionType
from app.domain.roles import SystemRoles
from app.domain.exceptions import (
    AuthorizationException,
    DuplicateAssignmentException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.context import get_current_actor_id
from app.shared.utils.datetime import ensure_utc, is_expired, utc_now

logger = logging.getLogger(__name__)


def _edge_to_result(ur, role) -> UserRoleResult:
    return UserRoleResult(
        id=ur.id,
        user_id=ur.user_id,
        role_id=role.id,
        role_code=role.code,
        role_name=role.name,
        priority=role.priority,
        assigned_by=ur.assigned_by,
        assigned_at=ensure_utc(ur.assigned_at),
        expires_at=ensure_utc(ur.expires_at),
        status=ur.status,
    )


def _override_to_result(up, permission) -> PermissionOverrideResult:
    return PermissionOverrideResult(
        id=up.id,
        user_id=up.user_id,
        permission_id=permission.id,
        permission_code=permission.code,
        permission_type=up.permission_type,
        assigned_by=up.assigned_by,
        assigned_at=ensure_utc(up.assigned_at),
        expires_at=ensure_utc(up.expires_at),
        reason=up.reason,
        status=up.status,
    )


class AssignmentService:
    """Assign/remove roles and grant/revoke direct permissions for accounts."""

    def __init__(
        self,
        account_repo: IAccountRepository,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        user_role_repo: IUserRoleRepository,
        user_permission_repo: IUserPermissionRepository,
    ) -> None:
        self._account_repo = account_repo
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._user_role_repo = user_role_repo
        self._user_permission_repo = user_permission_repo

    async def _get_account(self, user_id: str, tenant_id: str | None):
        account = await self._account_repo.get_in_parish(user_id, tenant_id)
        if account is None:
            raise ResourceNotFoundException("account", user_id)
        return account

    async def get_account(self, user_id: str, tenant_id: str | None = None) -> AccountResult:
        """Account in the caller's scope; ResourceNotFoundException otherwise."""
        return account_to_result(await self._get_account(user_id, tenant_id))

    @staticmethod
    def _check_expiry(expires_at: datetime | None) -> datetime | None:
        if expires_at is None:
            return None
        expires_at = ensure_utc(expires_at)
        if expires_at <= utc_now():
            raise ValidationException("expires_at must be in the future", field="expires_at")
        return expires_at

    async def assign_role(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
        tenant_id: str | None = None,
    ) -> UserRoleResult:
        """Assign role_id to user_id.

        The role must be visible from the account's parish (global or owned
        by that parish).

        Raises:
            ResourceNotFoundException: Account or role unresolvable in scope.
            AuthorizationException: A parish-scoped caller assigning SUPER_ADMIN.
            DuplicateAssignmentException: An active, unexpired edge already exists.
        """
        account = await self._get_account(user_id, tenant_id)
        scope = tenant_id if tenant_id is not None else account.parish_id
        role = await self._role_repo.get_by_id_in_scope(role_id, scope)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        if tenant_id is not None and role.code == SystemRoles.SUPER_ADMIN:
            raise AuthorizationException(
                message="SUPER_ADMIN can only be assigned by a platform administrator"
            )
        expires_at = self._check_expiry(expires_at)
        assigned_by = assigned_by or get_current_actor_id()

        edge = await self._user_role_repo.get_edge(user_id, role_id)
        if edge is None:
            edge = await self._user_role_repo.add(user_id, role_id, assigned_by, expires_at)
        elif edge.is_active and not is_expired(edge.expires_at):
            raise DuplicateAssignmentException(
                "Role already assigned to user",
                assignment_type="user_role",
                details_extra={"user_id": user_id, "role_id": role_id},
            )
        else:
            edge = await self._user_role_repo.reactivate(edge, assigned_by, expires_at)
        logger.info("Role %s assigned to account %s", role.code, user_id)
        return _edge_to_result(edge, role)

    async def remove_role(
        self, user_id: str, role_id: str, tenant_id: str | None = None
    ) -> None:
        await self._get_account(user_id, tenant_id)
        if not await self._user_role_repo.remove(user_id, role_id):
            raise ResourceNotFoundException("user_role", f"{user_id}:{role_id}")
        logger.info("Role %s removed from account %s", role_id, user_id)

    async def list_user_roles(
        self, user_id: str, tenant_id: str | None = None
    ) -> list[UserRoleResult]:
        """Active, unexpired assignments on active roles, priority DESC."""
        await self._get_account(user_id, tenant_id)
        rows = await self._user_role_repo.get_user_roles(user_id)
        return [_edge_to_result(ur, role) for ur, role in rows]

    async def grant_permission(
        self,
        user_id: str,
        permission_id: str,
        assigned_by: str | None = None,
        reason: str | None = None,
        expires_at: datetime | None = None,
        tenant_id: str | None = None,
    ) -> PermissionOverrideResult:
        return await self._set_override(
            PermissionType.GRANT,
            user_id,
            permission_id,
            assigned_by=assigned_by,
            reason=reason,
            expires_at=expires_at,
            tenant_id=tenant_id,
        )

    async def revoke_permission(
        self,
        user_id: str,
        permission_id: str,
        assigned_by: str | None = None,
        reason: str | None = None,
        expires_at: datetime | None = None,
        tenant_id: str | None = None,
    ) -> PermissionOverrideResult:
        return await self._set_override(
            PermissionType.REVOKE,
            user_id,
            permission_id,
            assigned_by=assigned_by,
            reason=reason,
            expires_at=expires_at,
            tenant_id=tenant_id,
        )

    async def _set_override(
        self,
        permission_type: PermissionType,
        user_id: str,
        permission_id: str,
        *,
        assigned_by: str | None,
        reason: str | None,
        expires_at: datetime | None,
        tenant_id: str | None,
    ) -> PermissionOverrideResult:
        await self._get_account(user_id, tenant_id)
        permission = await self._permission_repo.get_permission(permission_id)
        if permission is None:
            raise ResourceNotFoundException("permission", permission_id)
        expires_at = self._check_expiry(expires_at)

        if permission_type is PermissionType.GRANT:
            await self._user_permission_repo.remove(
                user_id, permission_id, PermissionType.REVOKE
            )
        elif expires_at is None:
            await self._user_permission_repo.remove(
                user_id, permission_id, PermissionType.GRANT
            )
        up = await self._user_permission_repo.upsert(
            user_id,
            permission_id,
            permission_type,
            assigned_by=assigned_by or get_current_actor_id(),
            expires_at=expires_at,
            reason=reason,
        )
        logger.info(
            "Permission %s %s for account %s (expires_at=%s)",
            permission.code,
            permission_type.value,
            user_id,
            expires_at.isoformat() if expires_at else "never",
        )
        return _override_to_result(up, permission)

    async def list_overrides(
        self, user_id: str, tenant_id: str | None = None
    ) -> list[PermissionOverrideResult]:
        await self._get_account(user_id, tenant_id)
        rows = await self._user_permission_repo.list_for_user(user_id)
        return [_override_to_result(up, p) for up, p in rows]

    async def remove_override(
        self, user_id: str, permission_id: str, tenant_id: str | None = None
    ) -> None:
        """Delete every override (GRANT and REVOKE) for the pair."""
        await self._get_account(user_id, tenant_id)
        if not await self._user_permission_repo.remove(user_id, permission_id):
            raise ResourceNotFoundException(
                "permission_override", f"{user_id}:{permission_id}"
            )

    async def deactivate_expired(
        self, now: datetime | None = None
    ) -> ExpiredAssignmentsResult:
        """Mark expired role edges and overrides inactive (scheduled cleanup)."""
        now = now or utc_now()
        result = ExpiredAssignmentsResult(
            user_roles=await self._user_role_repo.deactivate_expired(now),
            user_permissions=await self._user_permission_repo.deactivate_expired(now),
        )
        logger.info(
            "Expired assignments deactivated: %d roles, %d overrides",
            result.user_roles,
            result.user_permissions,
        )
        return result
