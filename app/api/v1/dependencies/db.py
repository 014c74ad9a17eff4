"""DB session, unit of work and repository dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.provisioning_service import UnitOfWorkFactory
from app.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
    get_session_factory,
)
from app.infrastructure.persistence.repositories import (
    AccountRepository,
    ParishRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserPermissionRepository,
    UserRoleRepository,
)
from app.infrastructure.persistence.unit_of_work import unit_of_work_factory


def get_uow_factory() -> UnitOfWorkFactory:
    """Factory of independent units of work (saga steps, bulk families)."""
    factory: UnitOfWorkFactory = unit_of_work_factory(get_session_factory())
    return factory


async def get_account_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AccountRepository:
    """Account repository for reads (authentication, login)."""
    return AccountRepository(db)


async def get_role_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RoleRepository:
    return RoleRepository(db)


async def get_permission_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> PermissionRepository:
    return PermissionRepository(db)


async def get_role_permission_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RolePermissionRepository:
    return RolePermissionRepository(db)


async def get_user_role_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> UserRoleRepository:
    return UserRoleRepository(db)


async def get_user_permission_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> UserPermissionRepository:
    return UserPermissionRepository(db)


async def get_account_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> AccountRepository:
    return AccountRepository(db)


async def get_parish_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ParishRepository:
    return ParishRepository(db)
