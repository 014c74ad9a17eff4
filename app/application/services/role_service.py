"""Role registry and role-permission binding.

Scope rule: no tenant -> global roles only; a tenant -> global roles plus
that tenant's roles. Roles outside the caller's scope are reported as not
found. System roles are created only by catalog seeding and are immutable
afterwards.
"""

from __future__ import annotations

import logging

from app.application.dtos.account import AccountResult
from app.application.dtos.permission import PermissionResult
from app.application.dtos.role import RoleCreate, RoleResult, RoleUpdate
from app.application.interfaces.repositories import (
    IParishRepository,
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
)
from app.domain.enums import RecordStatus
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    SystemRoleImmutableException,
    ValidationException,
)
from app.domain.value_objects import RoleCode

logger = logging.getLogger(__name__)


class RoleService:
    """Role CRUD within a tenant scope plus permission bindings."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        role_permission_repo: IRolePermissionRepository,
        parish_repo: IParishRepository | None = None,
    ) -> None:
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._role_permission_repo = role_permission_repo
        self._parish_repo = parish_repo

    async def get_by_code(self, code: str, tenant_id: str | None = None) -> RoleResult:
        role = await self._role_repo.get_by_code(code, tenant_id)
        if role is None:
            raise ResourceNotFoundException("role", code)
        return role

    async def get_by_id(self, role_id: str, tenant_id: str | None = None) -> RoleResult:
        role = await self._role_repo.get_by_id_in_scope(role_id, tenant_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        return role

    async def list_all(
        self, tenant_id: str | None = None, *, include_inactive: bool = False
    ) -> list[RoleResult]:
        """Roles visible from the scope, priority DESC then name."""
        return await self._role_repo.list_in_scope(
            tenant_id, include_inactive=include_inactive
        )

    async def create(
        self,
        data: RoleCreate,
        created_by: str | None = None,
        *,
        seed: bool = False,
    ) -> RoleResult:
        """Create a global (tenant_id None) or tenant role.

        Raises:
            ValidationException: Malformed role code or unknown parish.
            SystemRoleImmutableException: is_system_role requested by a non-seed caller.
            RoleAlreadyExistsException: Code already visible in the requested scope.
        """
        try:
            code = RoleCode(data.code).value
        except ValueError as e:
            raise ValidationException(str(e), field="code") from e
        if data.is_system_role and not seed:
            raise SystemRoleImmutableException(code, "create")
        if data.tenant_id is not None and self._parish_repo is not None:
            if await self._parish_repo.get_active(data.tenant_id) is None:
                raise ValidationException("Parish not found or inactive", field="parish_id")
        # Best-effort pre-check; the unique constraint maps a racing insert to the same Conflict.
        if await self._role_repo.code_exists(code, data.tenant_id):
            raise RoleAlreadyExistsException(code, data.tenant_id)
        role = await self._role_repo.create_role(
            code=code,
            name=data.name,
            tenant_id=data.tenant_id,
            description=data.description,
            priority=data.priority,
            is_system_role=data.is_system_role,
            created_by=created_by,
        )
        logger.info(
            "Role created: %s (tenant=%s, system=%s)",
            role.code,
            role.tenant_id or "global",
            role.is_system_role,
        )
        return role

    async def update(
        self, role_id: str, patch: RoleUpdate, tenant_id: str | None = None
    ) -> RoleResult:
        role = await self._get_mutable_role(role_id, tenant_id, "update")
        if patch.name is not None:
            role.name = patch.name
        if patch.description is not None:
            role.description = patch.description
        if patch.priority is not None:
            role.priority = patch.priority
        if patch.status is not None:
            role.status = RecordStatus(patch.status).value
        return await self._role_repo.save(role)

    async def soft_delete(self, role_id: str, tenant_id: str | None = None) -> RoleResult:
        """Deactivate the role. Its bindings and edges stay but stop contributing."""
        role = await self._get_mutable_role(role_id, tenant_id, "delete")
        role.status = RecordStatus.INACTIVE.value
        result = await self._role_repo.save(role)
        logger.info("Role deactivated: %s", result.code)
        return result

    async def list_role_users(
        self, role_id: str, tenant_id: str | None = None
    ) -> list[AccountResult]:
        """Accounts holding the role; a tenant caller only sees its own accounts."""
        await self.get_by_id(role_id, tenant_id)
        accounts = await self._role_repo.list_role_users(role_id)
        return [a for a in accounts if tenant_id is None or a.parish_id == tenant_id]

    async def get_role_permissions(
        self, role_id: str, tenant_id: str | None = None
    ) -> list[PermissionResult]:
        await self.get_by_id(role_id, tenant_id)
        return await self._role_permission_repo.get_permissions_for_role(role_id)

    async def bind_permission(
        self,
        role_id: str,
        permission_id: str,
        granted_by: str | None = None,
        tenant_id: str | None = None,
    ) -> PermissionResult:
        """Bind a catalog permission to a custom role.

        Raises:
            DuplicateAssignmentException: The pair is already bound.
        """
        role = await self._get_mutable_role(role_id, tenant_id, "bind_permission")
        perm = await self._permission_repo.get_permission(permission_id)
        if perm is None:
            raise ResourceNotFoundException("permission", permission_id)
        await self._role_permission_repo.bind(role.id, perm.id, granted_by)
        return perm

    async def unbind_permission(
        self, role_id: str, permission_id: str, tenant_id: str | None = None
    ) -> None:
        role = await self._get_mutable_role(role_id, tenant_id, "unbind_permission")
        if not await self._role_permission_repo.unbind(role.id, permission_id):
            raise ResourceNotFoundException("role_permission", f"{role_id}:{permission_id}")

    async def _get_mutable_role(
        self, role_id: str, tenant_id: str | None, operation: str
    ):
        role = await self._role_repo.get_entity_in_scope(role_id, tenant_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        if role.is_system_role:
            raise SystemRoleImmutableException(role.code, operation)
        if tenant_id is not None and role.tenant_id is None:
            raise AuthorizationException(
                message="Global roles can only be changed by a platform administrator"
            )
        return role
