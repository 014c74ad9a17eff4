"""AuthorizationService unit tests with a mocked permission resolver."""

from unittest.mock import AsyncMock

import pytest

from app.application.dtos.account import AccountResult
from app.application.services.authorization_service import AuthorizationService
from app.domain.exceptions import AuthorizationException
from app.domain.value_objects import Scoped, Unrestricted


def _account(*, is_tenant_admin: bool = False) -> AccountResult:
    return AccountResult(
        id="acc1",
        email="member@stjude.org",
        first_name="Mary",
        last_name="Okello",
        phone=None,
        kind="church_admin" if is_tenant_admin else "parishioner",
        parish_id="p1",
        is_tenant_admin=is_tenant_admin,
        status="active",
    )


@pytest.fixture
def resolver() -> AsyncMock:
    r = AsyncMock()
    r.check = AsyncMock(return_value=False)
    r.access_for = AsyncMock(return_value=Scoped(frozenset({"events.view"})))
    return r


async def test_tenant_admin_short_circuits_without_resolver_query(resolver) -> None:
    svc = AuthorizationService(resolver)
    admin = _account(is_tenant_admin=True)

    await svc.require_permission(admin, "roles.delete")
    await svc.require_all_permissions(admin, ["roles.view", "roles.update"])

    assert isinstance(await svc.get_access(admin), Unrestricted)
    resolver.check.assert_not_awaited()
    resolver.access_for.assert_not_awaited()


async def test_require_permission_names_missing_code(resolver) -> None:
    svc = AuthorizationService(resolver)
    with pytest.raises(AuthorizationException) as exc_info:
        await svc.require_permission(_account(), "events.create")
    assert exc_info.value.message == "Permission denied: events.create"
    resolver.check.assert_awaited_once_with("acc1", "events.create")


async def test_require_permission_passes_when_held(resolver) -> None:
    resolver.check.return_value = True
    svc = AuthorizationService(resolver)
    await svc.require_permission(_account(), "events.view")


async def test_require_any_permission(resolver) -> None:
    svc = AuthorizationService(resolver)
    await svc.require_any_permission(_account(), ["events.create", "events.view"])
    with pytest.raises(AuthorizationException) as exc_info:
        await svc.require_any_permission(_account(), ["events.create", "events.delete"])
    assert "Required one of: events.create, events.delete" in exc_info.value.message


async def test_require_all_permissions_lists_only_missing(resolver) -> None:
    svc = AuthorizationService(resolver)
    with pytest.raises(AuthorizationException) as exc_info:
        await svc.require_all_permissions(
            _account(), ["events.view", "events.create", "events.delete"]
        )
    assert exc_info.value.details["missing_permissions"] == [
        "events.create",
        "events.delete",
    ]


async def test_effective_permissions_uses_catalog_for_tenant_admin(resolver) -> None:
    resolver.catalog = AsyncMock(return_value=["catalog"])
    resolver.resolve = AsyncMock(return_value=["resolved"])
    svc = AuthorizationService(resolver)

    assert await svc.effective_permissions(_account(is_tenant_admin=True)) == ["catalog"]
    assert await svc.effective_permissions(_account()) == ["resolved"]
    resolver.resolve.assert_awaited_once_with("acc1")
