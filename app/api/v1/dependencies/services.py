"""Application service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.application.services import (
    AssignmentService,
    AuthService,
    BulkFamilyService,
    ParishService,
    PermissionService,
    ProvisioningService,
    RoleService,
)
from app.application.services.provisioning_service import UnitOfWorkFactory
from app.core.config import get_settings
from app.infrastructure.persistence.repositories import (
    AccountRepository,
    ParishRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserPermissionRepository,
    UserRoleRepository,
)
from app.infrastructure.security.password import hash_password, verify_password
from app.infrastructure.services.notification_sink import get_notification_sink

from .db import (
    get_account_repo,
    get_account_repo_for_write,
    get_parish_repo_for_write,
    get_permission_repo_for_write,
    get_role_permission_repo_for_write,
    get_role_repo_for_write,
    get_uow_factory,
    get_user_permission_repo_for_write,
    get_user_role_repo_for_write,
)


def get_auth_service(
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
) -> AuthService:
    return AuthService(account_repo, verify_password)


def get_role_service(
    role_repo: Annotated[RoleRepository, Depends(get_role_repo_for_write)],
    permission_repo: Annotated[PermissionRepository, Depends(get_permission_repo_for_write)],
    role_permission_repo: Annotated[
        RolePermissionRepository, Depends(get_role_permission_repo_for_write)
    ],
    parish_repo: Annotated[ParishRepository, Depends(get_parish_repo_for_write)],
) -> RoleService:
    """Role service; all repositories share the request transaction."""
    return RoleService(
        role_repo=role_repo,
        permission_repo=permission_repo,
        role_permission_repo=role_permission_repo,
        parish_repo=parish_repo,
    )


def get_permission_service(
    permission_repo: Annotated[PermissionRepository, Depends(get_permission_repo_for_write)],
) -> PermissionService:
    return PermissionService(permission_repo=permission_repo)


def get_assignment_service(
    account_repo: Annotated[AccountRepository, Depends(get_account_repo_for_write)],
    role_repo: Annotated[RoleRepository, Depends(get_role_repo_for_write)],
    permission_repo: Annotated[PermissionRepository, Depends(get_permission_repo_for_write)],
    user_role_repo: Annotated[UserRoleRepository, Depends(get_user_role_repo_for_write)],
    user_permission_repo: Annotated[
        UserPermissionRepository, Depends(get_user_permission_repo_for_write)
    ],
) -> AssignmentService:
    return AssignmentService(
        account_repo=account_repo,
        role_repo=role_repo,
        permission_repo=permission_repo,
        user_role_repo=user_role_repo,
        user_permission_repo=user_permission_repo,
    )


def get_provisioning_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> ProvisioningService:
    """Saga-driven provisioning; each step opens its own unit of work."""
    settings = get_settings()
    return ProvisioningService(
        uow_factory,
        hash_password,
        get_notification_sink(),
        password_length=settings.generated_password_length,
    )


def get_parish_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
    provisioning: Annotated[ProvisioningService, Depends(get_provisioning_service)],
) -> ParishService:
    return ParishService(uow_factory, provisioning)


def get_bulk_family_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> BulkFamilyService:
    settings = get_settings()
    return BulkFamilyService(
        uow_factory,
        hash_password,
        get_notification_sink(),
        max_members=settings.bulk_max_members,
        max_import_rows=settings.bulk_import_max_rows,
        password_length=settings.generated_password_length,
    )
