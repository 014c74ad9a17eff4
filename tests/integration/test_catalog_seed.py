"""Catalog seeding against SQLite."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domain.roles import SystemRoles
from app.infrastructure.persistence.repositories import (
    RolePermissionRepository,
    RoleRepository,
)
from app.infrastructure.services.catalog_seeder import (
    SYSTEM_PERMISSIONS,
    SYSTEM_ROLES,
    WARD_ROLES,
    CatalogSeeder,
)


async def _seed(session_factory: async_sessionmaker[AsyncSession]):
    async with session_factory() as session:
        async with session.begin():
            return await CatalogSeeder(session).seed()


async def test_seed_is_idempotent(session_factory) -> None:
    first = await _seed(session_factory)
    assert first.permissions_created == len(SYSTEM_PERMISSIONS)
    assert first.roles_created == len(SYSTEM_ROLES) + len(WARD_ROLES)
    assert first.bindings_created > 0

    second = await _seed(session_factory)
    assert (second.permissions_created, second.roles_created, second.bindings_created) == (
        0,
        0,
        0,
    )


async def test_seeded_roles_are_global_system_roles(session_factory) -> None:
    await _seed(session_factory)
    async with session_factory() as session:
        roles = await RoleRepository(session).list_in_scope(None)
        super_admin = await RoleRepository(session).get_by_code(SystemRoles.SUPER_ADMIN)
        bound = await RolePermissionRepository(session).get_permission_ids_for_role(
            super_admin.id
        )
    assert all(r.is_system_role and r.tenant_id is None for r in roles)
    assert len(bound) == len(SYSTEM_PERMISSIONS)
