"""PermissionResolver against SQLite: role union, overrides, expiry, precedence."""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.services.assignment_service import AssignmentService
from app.domain.enums import RecordStatus
from app.domain.roles import SystemRoles, WardRoles
from app.domain.value_objects import Scoped, Unrestricted
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.repositories import (
    AccountRepository,
    PermissionRepository,
    RoleRepository,
    UserPermissionRepository,
    UserRoleRepository,
)
from app.infrastructure.services.permission_resolver import PermissionResolver
from app.shared.utils.datetime import utc_now

pytestmark = pytest.mark.usefixtures("seeded")


def _assignments(session: AsyncSession) -> AssignmentService:
    return AssignmentService(
        AccountRepository(session),
        RoleRepository(session),
        PermissionRepository(session),
        UserRoleRepository(session),
        UserPermissionRepository(session),
    )


async def _permission_id(session_factory, code: str) -> str:
    async with session_factory() as session:
        perm = await PermissionRepository(session).get_by_code(code)
        assert perm is not None
        return perm.id


async def _role_id(session_factory, code: str) -> str:
    async with session_factory() as session:
        role = await RoleRepository(session).get_by_code(code)
        assert role is not None
        return role.id


async def _codes(session_factory, user_id: str, at=None) -> set[str]:
    async with session_factory() as session:
        return await PermissionResolver(session).get_user_permissions(user_id, at)


async def _check(session_factory, user_id: str, code: str, at=None) -> bool:
    async with session_factory() as session:
        return await PermissionResolver(session).check(user_id, code, at)


async def test_family_member_holds_only_role_permissions(
    session_factory: async_sessionmaker[AsyncSession], make_account, parish_id
) -> None:
    member = await make_account(
        "member@stjude.org", parish_id=parish_id, role_code=SystemRoles.FAMILY_MEMBER
    )
    assert await _codes(session_factory, member.id) == {
        "families.view",
        "events.view",
        "prayer_requests.view",
        "prayer_requests.create",
    }
    assert not await _check(session_factory, member.id, "events.create")


async def test_account_without_roles_has_no_permissions(
    session_factory, make_account, parish_id
) -> None:
    bare = await make_account("bare@stjude.org", parish_id=parish_id)
    assert await _codes(session_factory, bare.id) == set()


async def test_permissions_are_union_of_roles(session_factory, make_account, parish_id) -> None:
    member = await make_account(
        "convener@stjude.org", parish_id=parish_id, role_code=SystemRoles.FAMILY_MEMBER
    )
    convener_id = await _role_id(session_factory, WardRoles.CONVENER)
    async with session_factory() as session:
        async with session.begin():
            await _assignments(session).assign_role(member.id, convener_id)

    codes = await _codes(session_factory, member.id)
    assert {"events.create", "events.update", "prayer_requests.create"} <= codes


async def test_grant_then_temporary_revoke_then_lapse(
    session_factory, make_account, parish_id
) -> None:
    member = await make_account(
        "grant@stjude.org", parish_id=parish_id, role_code=SystemRoles.FAMILY_MEMBER
    )
    events_create = await _permission_id(session_factory, "events.create")

    async with session_factory() as session:
        async with session.begin():
            await _assignments(session).grant_permission(member.id, events_create)
    assert await _check(session_factory, member.id, "events.create")

    revoke_until = utc_now() + timedelta(days=7)
    async with session_factory() as session:
        async with session.begin():
            await _assignments(session).revoke_permission(
                member.id, events_create, expires_at=revoke_until
            )
    assert not await _check(session_factory, member.id, "events.create")

    # The GRANT survives a temporary REVOKE and applies again once it lapses.
    later = revoke_until + timedelta(days=1)
    assert await _check(session_factory, member.id, "events.create", at=later)


async def test_permanent_revoke_deletes_grant(session_factory, make_account, parish_id) -> None:
    member = await make_account("perm@stjude.org", parish_id=parish_id)
    events_create = await _permission_id(session_factory, "events.create")
    async with session_factory() as session:
        async with session.begin():
            svc = _assignments(session)
            await svc.grant_permission(member.id, events_create)
            await svc.revoke_permission(member.id, events_create)
    async with session_factory() as session:
        overrides = await UserPermissionRepository(session).list_for_user(member.id)
    assert [up.permission_type for up, _ in overrides] == ["REVOKE"]


async def test_revoke_beats_role_permission(session_factory, make_account, parish_id) -> None:
    member = await make_account(
        "revoked@stjude.org", parish_id=parish_id, role_code=SystemRoles.FAMILY_MEMBER
    )
    events_view = await _permission_id(session_factory, "events.view")
    async with session_factory() as session:
        async with session.begin():
            await _assignments(session).revoke_permission(member.id, events_view)

    assert not await _check(session_factory, member.id, "events.view")
    assert "events.view" not in await _codes(session_factory, member.id)


async def test_expired_role_edge_contributes_nothing(
    session_factory, make_account, parish_id
) -> None:
    member = await make_account("expired@stjude.org", parish_id=parish_id)
    convener_id = await _role_id(session_factory, WardRoles.CONVENER)
    async with session_factory() as session:
        async with session.begin():
            await UserRoleRepository(session).add(
                member.id, convener_id, expires_at=utc_now() - timedelta(hours=1)
            )
    assert await _codes(session_factory, member.id) == set()


async def test_role_edge_with_future_expiry_counts_until_then(
    session_factory, make_account, parish_id
) -> None:
    member = await make_account("temp@stjude.org", parish_id=parish_id)
    convener_id = await _role_id(session_factory, WardRoles.CONVENER)
    until = utc_now() + timedelta(days=30)
    async with session_factory() as session:
        async with session.begin():
            await _assignments(session).assign_role(member.id, convener_id, expires_at=until)

    assert await _check(session_factory, member.id, "events.create")
    assert not await _check(
        session_factory, member.id, "events.create", at=until + timedelta(seconds=1)
    )


async def test_inactive_role_contributes_nothing(session_factory, make_account, parish_id) -> None:
    member = await make_account(
        "inactive@stjude.org", parish_id=parish_id, role_code=SystemRoles.FAMILY_MEMBER
    )
    role_id = await _role_id(session_factory, SystemRoles.FAMILY_MEMBER)
    async with session_factory() as session:
        async with session.begin():
            role = await session.get(Role, role_id)
            role.status = RecordStatus.INACTIVE.value
    assert await _codes(session_factory, member.id) == set()


async def test_inactive_catalog_entry_is_not_held(
    session_factory, make_account, parish_id
) -> None:
    member = await make_account(
        "catalog@stjude.org", parish_id=parish_id, role_code=SystemRoles.FAMILY_MEMBER
    )
    events_view = await _permission_id(session_factory, "events.view")
    async with session_factory() as session:
        async with session.begin():
            await PermissionRepository(session).set_status(events_view, RecordStatus.INACTIVE)
    assert not await _check(session_factory, member.id, "events.view")


async def test_access_for_tenant_admin_is_unrestricted(
    session_factory, make_account, parish_id
) -> None:
    admin = await make_account("admin@stjude.org", parish_id=parish_id, is_tenant_admin=True)
    member = await make_account(
        "m2@stjude.org", parish_id=parish_id, role_code=SystemRoles.FAMILY_MEMBER
    )
    async with session_factory() as session:
        resolver = PermissionResolver(session)
        assert isinstance(await resolver.access_for(admin), Unrestricted)
        scoped = await resolver.access_for(member)
    assert isinstance(scoped, Scoped)
    assert scoped.allows("events.view")


async def test_deactivate_expired_marks_rows_inactive(
    session_factory, make_account, parish_id
) -> None:
    member = await make_account("cleanup@stjude.org", parish_id=parish_id)
    convener_id = await _role_id(session_factory, WardRoles.CONVENER)
    past = utc_now() - timedelta(minutes=5)
    async with session_factory() as session:
        async with session.begin():
            await UserRoleRepository(session).add(member.id, convener_id, expires_at=past)
    async with session_factory() as session:
        async with session.begin():
            result = await _assignments(session).deactivate_expired()
    assert result.user_roles == 1
    assert result.user_permissions == 0
