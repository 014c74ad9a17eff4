"""Role repository. Read methods return RoleResult (DTO); entity getters return ORM for writes.

Scope rule for every lookup: no tenant -> global roles only; a tenant ->
global roles plus that tenant's own roles.
"""

from sqlalchemy import ColumnElement, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.account import AccountResult
from app.application.dtos.mappers import account_to_result
from app.application.dtos.role import RoleResult
from app.domain.enums import RecordStatus
from app.domain.exceptions import RoleAlreadyExistsException
from app.infrastructure.persistence.models.account import Account
from app.infrastructure.persistence.models.permission import UserRole
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.repositories.base import (
    BaseRepository,
    is_unique_violation,
)
from app.shared.utils.datetime import utc_now


def _role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        tenant_id=r.tenant_id,
        code=r.code,
        name=r.name,
        description=r.description,
        priority=r.priority,
        is_system_role=r.is_system_role,
        status=r.status,
    )


def role_scope(tenant_id: str | None) -> ColumnElement[bool]:
    """WHERE clause selecting the roles visible from a tenant scope."""
    if tenant_id is None:
        return Role.tenant_id.is_(None)
    return or_(Role.tenant_id.is_(None), Role.tenant_id == tenant_id)


class RoleRepository(BaseRepository[Role]):
    """Role repository. Read methods return RoleResult; use get_entity_in_scope for update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    def _on_integrity_error(self, obj: Role, exc: Exception) -> None:
        if isinstance(exc, IntegrityError) and is_unique_violation(exc):
            raise RoleAlreadyExistsException(obj.code, obj.tenant_id) from None

    async def create_role(
        self,
        code: str,
        name: str,
        *,
        tenant_id: str | None = None,
        description: str | None = None,
        priority: int = 0,
        is_system_role: bool = False,
        created_by: str | None = None,
    ) -> RoleResult:
        """Create a role; return read-model DTO."""
        role = Role(
            tenant_id=tenant_id,
            code=code,
            name=name,
            description=description,
            priority=priority,
            is_system_role=is_system_role,
            created_by=created_by,
            status=RecordStatus.ACTIVE.value,
        )
        created = await self.create(role)
        return _role_to_result(created)

    async def get_by_code(self, code: str, tenant_id: str | None = None) -> RoleResult | None:
        """Return the role with code visible from the scope.

        A tenant-owned role shadows a global role with the same code.
        """
        result = await self.db.execute(
            select(Role)
            .where(Role.code == code, role_scope(tenant_id))
            .order_by(Role.tenant_id.is_(None))
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def code_exists(self, code: str, tenant_id: str | None = None) -> bool:
        result = await self.db.execute(
            select(Role.id).where(Role.code == code, role_scope(tenant_id)).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def get_by_id_in_scope(
        self, role_id: str, tenant_id: str | None = None
    ) -> RoleResult | None:
        """Return role by id if visible from the scope (read-model DTO)."""
        orm = await self.get_entity_in_scope(role_id, tenant_id)
        return _role_to_result(orm) if orm else None

    async def get_entity_in_scope(
        self, role_id: str, tenant_id: str | None = None
    ) -> Role | None:
        """Return role ORM by id within the scope, for update/delete."""
        result = await self.db.execute(
            select(Role).where(Role.id == role_id, role_scope(tenant_id))
        )
        return result.scalar_one_or_none()

    async def list_in_scope(
        self,
        tenant_id: str | None = None,
        *,
        include_inactive: bool = False,
    ) -> list[RoleResult]:
        """Roles visible from the scope, highest priority first, then by name."""
        q = select(Role).where(role_scope(tenant_id))
        if not include_inactive:
            q = q.where(Role.status == RecordStatus.ACTIVE.value)
        result = await self.db.execute(q.order_by(Role.priority.desc(), Role.name))
        return [_role_to_result(r) for r in result.scalars().all()]

    async def save(self, role: Role) -> RoleResult:
        return _role_to_result(await self.update(role))

    async def list_role_users(self, role_id: str) -> list[AccountResult]:
        """Accounts holding the role through an active, unexpired edge."""
        now = utc_now()
        result = await self.db.execute(
            select(Account)
            .join(UserRole, UserRole.user_id == Account.id)
            .where(
                UserRole.role_id == role_id,
                UserRole.status == RecordStatus.ACTIVE.value,
                or_(UserRole.expires_at.is_(None), UserRole.expires_at > now),
            )
            .order_by(Account.last_name, Account.first_name)
        )
        return [account_to_result(a) for a in result.scalars().all()]
