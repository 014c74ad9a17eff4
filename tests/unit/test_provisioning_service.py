"""ProvisioningService unit tests with a mocked unit of work."""

import asyncio
import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.account import AccountCreate
from app.application.dtos.parish import ChurchAdminProfile, ParishionerProfile
from app.application.dtos.role import RoleResult
from app.application.services.provisioning_service import ProvisioningService
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    ConfigurationException,
    ProvisioningFailedException,
    ResourceNotFoundException,
    ValidationException,
)


class _FakeUow:
    """Unit of work double; every repository is an AsyncMock."""

    def __init__(self) -> None:
        for name in (
            "accounts",
            "roles",
            "user_roles",
            "user_permissions",
            "parishes",
            "wards",
            "families",
            "parishioners",
            "church_admins",
        ):
            setattr(self, name, AsyncMock())

    async def __aenter__(self) -> "_FakeUow":
        return self

    async def __aexit__(self, *exc) -> bool:
        return False


def _role(status: str = "active") -> RoleResult:
    return RoleResult(
        id="role-fm",
        tenant_id=None,
        code="FAMILY_MEMBER",
        name="Family member",
        description=None,
        priority=10,
        is_system_role=True,
        status=status,
    )


def _account_row(email: str = "john@stjude.org") -> SimpleNamespace:
    return SimpleNamespace(
        id="acc1",
        email=email,
        first_name="John",
        last_name="Mukasa",
        phone=None,
        kind="parishioner",
        parish_id="p1",
        is_tenant_admin=False,
        status="active",
    )


@pytest.fixture
def uow() -> _FakeUow:
    u = _FakeUow()
    u.roles.get_by_code = AsyncMock(return_value=_role())
    u.accounts.email_exists = AsyncMock(return_value=False)
    u.accounts.create_account = AsyncMock(return_value=_account_row())
    u.parishes.get_active = AsyncMock(return_value=SimpleNamespace(id="p1"))
    u.parishioners.create_profile = AsyncMock(
        return_value=SimpleNamespace(
            id="prof1",
            account_id="acc1",
            parish_id="p1",
            ward_id=None,
            family_id=None,
            member_status="active",
            status="active",
        )
    )
    return u


@pytest.fixture
def sink() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(uow, sink) -> ProvisioningService:
    return ProvisioningService(lambda: uow, lambda p: f"hashed:{p}", sink)


def _data(password: str | None = "CorrectHorse9!") -> AccountCreate:
    return AccountCreate(
        email="john@stjude.org",
        first_name="John",
        last_name="Mukasa",
        password=password,
        parish_id="p1",
    )


async def test_happy_path_binds_default_role_and_notifies(service, uow, sink) -> None:
    result = await service.create_parishioner(_data(password=None), ParishionerProfile())

    assert result.role_code == "FAMILY_MEMBER"
    assert result.account.id == "acc1"
    assert result.temporary_password is not None
    uow.user_roles.add.assert_awaited_once()
    assert uow.user_roles.add.await_args.args[:2] == ("acc1", "role-fm")
    hashed = uow.accounts.create_account.await_args.kwargs["hashed_password"]
    assert hashed == f"hashed:{result.temporary_password}"
    sink.send_welcome.assert_awaited_once_with(result.account, result.temporary_password)


async def test_missing_default_role_creates_nothing(service, uow, caplog) -> None:
    uow.roles.get_by_code.return_value = None
    with caplog.at_level(logging.ERROR):
        with pytest.raises(ConfigurationException):
            await service.register_parishioner(_data())
    uow.accounts.create_account.assert_not_awaited()
    assert any("FAMILY_MEMBER" in r.getMessage() for r in caplog.records)


async def test_inactive_default_role_is_configuration_error(service, uow) -> None:
    uow.roles.get_by_code.return_value = _role(status="inactive")
    with pytest.raises(ConfigurationException):
        await service.register_parishioner(_data())


async def test_duplicate_email_is_conflict(service, uow) -> None:
    uow.accounts.email_exists.return_value = True
    with pytest.raises(AccountAlreadyExistsException):
        await service.register_parishioner(_data())
    uow.accounts.create_account.assert_not_awaited()


async def test_register_requires_password(service, uow) -> None:
    with pytest.raises(ValidationException):
        await service.register_parishioner(_data(password=None))
    uow.roles.get_by_code.assert_not_awaited()


async def test_profile_must_match_kind(service) -> None:
    with pytest.raises(ValidationException):
        await service.provision_account_with_profile(
            "parishioner", _data(), ChurchAdminProfile()
        )


async def test_bind_failure_deletes_account(service, uow, sink) -> None:
    uow.user_roles.add.side_effect = RuntimeError("deadlock")

    with pytest.raises(ProvisioningFailedException):
        await service.register_parishioner(_data())

    uow.accounts.delete_by_id.assert_awaited_once_with("acc1")
    uow.parishioners.create_profile.assert_not_awaited()
    sink.send_welcome.assert_not_awaited()


async def test_profile_failure_removes_edge_then_account(service, uow) -> None:
    calls: list[str] = []
    uow.parishioners.create_profile.side_effect = RuntimeError("insert failed")
    uow.user_roles.remove.side_effect = lambda *a: calls.append("edge")
    uow.accounts.delete_by_id.side_effect = lambda *a: calls.append("account")

    with pytest.raises(ProvisioningFailedException):
        await service.register_parishioner(_data())

    uow.user_roles.remove.assert_awaited_once_with("acc1", "role-fm")
    assert calls == ["edge", "account"]


async def test_profile_domain_error_is_reraised_after_compensation(service, uow) -> None:
    uow.parishioners.create_profile.side_effect = ValidationException("bad ward")

    with pytest.raises(ValidationException, match="bad ward"):
        await service.register_parishioner(_data())
    uow.accounts.delete_by_id.assert_awaited_once_with("acc1")


async def test_notification_failure_does_not_fail_provisioning(service, sink) -> None:
    sink.send_welcome.side_effect = RuntimeError("smtp down")
    result = await service.register_parishioner(_data())
    assert result.account.email == "john@stjude.org"


async def test_tenant_caller_cannot_provision_into_other_parish(service, uow) -> None:
    data = AccountCreate(
        email="x@stjude.org", first_name="X", last_name="Y", parish_id="p2"
    )
    with pytest.raises(ResourceNotFoundException):
        await service.create_parishioner(data, ParishionerProfile(), tenant_id="p1")
    uow.accounts.create_account.assert_not_awaited()


async def test_outcome_logged_when_caller_is_cancelled(service, uow, caplog) -> None:
    release = asyncio.Event()
    started = asyncio.Event()

    async def slow_create_account(**kwargs):
        started.set()
        await release.wait()
        raise RuntimeError("connection lost")

    uow.accounts.create_account = slow_create_account
    caller = asyncio.create_task(service.create_parishioner(_data(), ParishionerProfile()))
    await started.wait()

    with caplog.at_level(logging.INFO):
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller
        release.set()
        for _ in range(10):
            await asyncio.sleep(0)

    assert "john@stjude.org failed after the caller was cancelled" in caplog.text
