"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Read methods exchange application DTOs; methods documented as returning a
row return the mutable persistence entity, which services only read
attributes from or hand back to the same repository.
"""

from __future__ import annotations

from datetime import datetime
from types import TracebackType
from typing import TYPE_CHECKING, Any, Protocol

from app.domain.enums import PermissionType, RecordStatus

if TYPE_CHECKING:
    from app.application.dtos.account import AccountResult
    from app.application.dtos.parish import (
        ChurchAdminProfile,
        ParishCreate,
        ParishionerProfile,
    )
    from app.application.dtos.permission import PermissionResult
    from app.application.dtos.role import RoleResult


class IPermissionRepository(Protocol):
    """Protocol for the global permission catalog."""

    async def get_permission(self, permission_id: str) -> PermissionResult | None: ...

    async def get_by_code(self, code: str) -> PermissionResult | None: ...

    async def list_permissions(
        self, module: str | None = None, *, include_inactive: bool = False
    ) -> list[PermissionResult]: ...

    async def set_status(
        self, permission_id: str, status: RecordStatus
    ) -> PermissionResult | None: ...


class IRoleRepository(Protocol):
    """Protocol for roles; lookups apply the global/tenant scope rule."""

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
    ) -> RoleResult: ...

    async def get_by_code(self, code: str, tenant_id: str | None = None) -> RoleResult | None: ...

    async def code_exists(self, code: str, tenant_id: str | None = None) -> bool: ...

    async def get_by_id_in_scope(
        self, role_id: str, tenant_id: str | None = None
    ) -> RoleResult | None: ...

    async def get_entity_in_scope(self, role_id: str, tenant_id: str | None = None) -> Any:
        """Return the role row for update/delete, or None."""

    async def list_in_scope(
        self, tenant_id: str | None = None, *, include_inactive: bool = False
    ) -> list[RoleResult]: ...

    async def save(self, role: Any) -> RoleResult: ...

    async def list_role_users(self, role_id: str) -> list[AccountResult]: ...


class IRolePermissionRepository(Protocol):
    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]: ...

    async def get_permission_ids_for_role(self, role_id: str) -> set[str]: ...

    async def bind(self, role_id: str, permission_id: str, granted_by: str | None = None) -> Any: ...

    async def unbind(self, role_id: str, permission_id: str) -> bool: ...


class IUserRoleRepository(Protocol):
    async def get_edge(self, user_id: str, role_id: str) -> Any: ...

    async def get_user_roles(
        self, user_id: str, at: datetime | None = None
    ) -> list[tuple[Any, Any]]:
        """Return (edge row, role row) pairs for active, unexpired edges."""

    async def add(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> Any: ...

    async def reactivate(
        self, ur: Any, assigned_by: str | None = None, expires_at: datetime | None = None
    ) -> Any: ...

    async def remove(self, user_id: str, role_id: str) -> bool: ...

    async def remove_all_for_user(self, user_id: str) -> int: ...

    async def deactivate_expired(self, now: datetime | None = None) -> int: ...


class IUserPermissionRepository(Protocol):
    async def list_for_user(self, user_id: str) -> list[tuple[Any, Any]]:
        """Return (override row, permission row) pairs."""

    async def upsert(
        self,
        user_id: str,
        permission_id: str,
        permission_type: PermissionType,
        *,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
        reason: str | None = None,
    ) -> Any: ...

    async def remove(
        self,
        user_id: str,
        permission_id: str,
        permission_type: PermissionType | None = None,
    ) -> int: ...

    async def remove_all_for_user(self, user_id: str) -> int: ...

    async def deactivate_expired(self, now: datetime | None = None) -> int: ...


class IAccountRepository(Protocol):
    async def get_by_id(self, entity_id: str) -> Any: ...

    async def get_by_email(self, email: str) -> Any: ...

    async def email_exists(self, email: str) -> bool: ...

    async def existing_emails(self, emails: list[str]) -> set[str]: ...

    async def create_account(
        self,
        *,
        email: str,
        hashed_password: str,
        first_name: str,
        last_name: str,
        kind: str,
        phone: str | None = None,
        parish_id: str | None = None,
        is_tenant_admin: bool = False,
    ) -> Any:
        """Raises AccountAlreadyExistsException on the e-mail unique key."""

    async def get_in_parish(self, account_id: str, parish_id: str | None) -> Any: ...

    async def deactivate(self, account: Any) -> Any: ...

    async def delete_by_id(self, entity_id: str) -> bool: ...


class IParishRepository(Protocol):
    async def create_parish(self, data: ParishCreate) -> Any: ...

    async def get_active(self, parish_id: str) -> Any: ...

    async def delete_by_id(self, entity_id: str) -> bool: ...


class IWardRepository(Protocol):
    async def get_in_parish(self, ward_id: str, parish_id: str) -> Any: ...

    async def get_by_number(self, parish_id: str, ward_number: str) -> Any: ...

    async def get_by_name(self, parish_id: str, name: str) -> Any: ...

    async def create_ward(
        self, parish_id: str, name: str, ward_number: str | None = None
    ) -> Any: ...

    async def recalculate_counts(self, ward_id: str) -> Any: ...


class IFamilyRepository(Protocol):
    async def get_in_parish(self, family_id: str, parish_id: str) -> Any: ...

    async def get_by_name(self, parish_id: str, family_name: str) -> Any: ...

    async def create_family(
        self,
        parish_id: str,
        family_name: str,
        *,
        ward_id: str | None = None,
        home_phone: str | None = None,
    ) -> Any: ...

    async def update(self, obj: Any) -> Any: ...


class IParishionerRepository(Protocol):
    async def create_profile(
        self, account_id: str, parish_id: str, profile: ParishionerProfile
    ) -> Any: ...

    async def get_in_parish(self, parishioner_id: str, parish_id: str) -> Any: ...

    async def delete_for_account(self, account_id: str) -> bool: ...

    async def deactivate(self, parishioner: Any) -> Any: ...


class IChurchAdminRepository(Protocol):
    async def create_profile(
        self, account_id: str, parish_id: str, profile: ChurchAdminProfile
    ) -> Any: ...


class IUnitOfWork(Protocol):
    """One transaction: commit on normal exit, rollback on exception."""

    accounts: IAccountRepository
    roles: IRoleRepository
    permissions: IPermissionRepository
    role_permissions: IRolePermissionRepository
    user_roles: IUserRoleRepository
    user_permissions: IUserPermissionRepository
    parishes: IParishRepository
    wards: IWardRepository
    families: IFamilyRepository
    parishioners: IParishionerRepository
    church_admins: IChurchAdminRepository

    async def __aenter__(self) -> IUnitOfWork: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...
