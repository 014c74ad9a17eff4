"""Provisioning saga end to end against SQLite (one unit of work per step)."""

import logging

import pytest
from sqlalchemy import func, select

from app.application.dtos.account import AccountCreate
from app.application.dtos.parish import ParishCreate, ParishionerProfile
from app.application.services.parish_service import ParishService
from app.application.services.provisioning_service import ProvisioningService
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AuthorizationException,
    ConfigurationException,
    ProvisioningFailedException,
    ValidationException,
)
from app.infrastructure.persistence.models.account import Account
from app.infrastructure.persistence.models.parish import Parish, Ward
from app.infrastructure.persistence.models.permission import UserRole
from app.infrastructure.persistence.repositories import (
    AccountRepository,
    ChurchAdminRepository,
    ParishionerRepository,
    ParishRepository,
    WardRepository,
)
from app.infrastructure.security.password import hash_password, verify_password
from app.infrastructure.services.permission_resolver import PermissionResolver


def _service(uow_factory) -> ProvisioningService:
    return ProvisioningService(uow_factory, hash_password)


def _account(email: str, parish_id: str | None, password: str | None = "CorrectHorse9!"):
    return AccountCreate(
        email=email,
        first_name="Grace",
        last_name="Atim",
        password=password,
        parish_id=parish_id,
    )


async def _count(session_factory, model, *criteria) -> int:
    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(model).where(*criteria)
        )
        return result.scalar_one()


@pytest.mark.usefixtures("seeded")
async def test_parishioner_provisioned_with_default_role(
    uow_factory, session_factory, parish_id
) -> None:
    result = await _service(uow_factory).create_parishioner(
        _account("grace@stjude.org", parish_id, password=None), ParishionerProfile()
    )

    assert result.role_code == "FAMILY_MEMBER"
    assert result.profile.parish_id == parish_id
    async with session_factory() as session:
        row = await AccountRepository(session).get_by_email("grace@stjude.org")
        assert verify_password(result.temporary_password, row.hashed_password)
        codes = await PermissionResolver(session).get_user_permissions(row.id)
    assert "events.view" in codes


async def test_missing_default_role_creates_no_account(
    uow_factory, session_factory, parish_id, caplog
) -> None:
    with caplog.at_level(logging.ERROR):
        with pytest.raises(ConfigurationException):
            await _service(uow_factory).register_parishioner(
                _account("norole@stjude.org", parish_id)
            )
    assert await _count(session_factory, Account) == 0
    assert "FAMILY_MEMBER" in caplog.text


@pytest.mark.usefixtures("seeded")
async def test_duplicate_email_conflicts(uow_factory, parish_id) -> None:
    svc = _service(uow_factory)
    await svc.register_parishioner(_account("dup@stjude.org", parish_id))
    with pytest.raises(AccountAlreadyExistsException):
        await svc.register_parishioner(_account("dup@stjude.org", parish_id))


@pytest.mark.usefixtures("seeded")
async def test_unique_violation_after_email_check_is_a_conflict(
    uow_factory, session_factory, parish_id, monkeypatch
) -> None:
    svc = _service(uow_factory)
    await svc.register_parishioner(_account("race@stjude.org", parish_id))

    async def never_taken(self, email):
        return False

    monkeypatch.setattr(AccountRepository, "email_exists", never_taken)

    with pytest.raises(AccountAlreadyExistsException):
        await svc.register_parishioner(_account("race@stjude.org", parish_id))
    assert await _count(session_factory, Account) == 1
    assert await _count(session_factory, UserRole) == 1


@pytest.mark.usefixtures("seeded")
async def test_ward_from_other_parish_is_rejected_before_account_exists(
    uow_factory, session_factory, parish_id
) -> None:
    async with session_factory() as session:
        async with session.begin():
            other = await ParishRepository(session).create_parish(ParishCreate(name="St. Peter"))
            ward = await WardRepository(session).create_ward(other.id, "Ward 1", "1")

    with pytest.raises(ValidationException):
        await _service(uow_factory).register_parishioner(
            _account("wrongward@stjude.org", parish_id),
            ParishionerProfile(ward_id=ward.id),
        )
    assert await _count(session_factory, Account) == 0


@pytest.mark.usefixtures("seeded")
async def test_profile_failure_compensates_edge_and_account(
    uow_factory, session_factory, parish_id, monkeypatch
) -> None:
    async def fail(*args, **kwargs):
        raise RuntimeError("profile insert failed")

    monkeypatch.setattr(ParishionerRepository, "create_profile", fail)

    with pytest.raises(ProvisioningFailedException):
        await _service(uow_factory).register_parishioner(
            _account("rollback@stjude.org", parish_id)
        )

    assert await _count(session_factory, Account) == 0
    assert await _count(session_factory, UserRole) == 0


@pytest.mark.usefixtures("seeded")
async def test_failed_compensation_is_logged_critical(
    uow_factory, session_factory, parish_id, monkeypatch, caplog
) -> None:
    async def fail_profile(*args, **kwargs):
        raise RuntimeError("profile insert failed")

    async def fail_delete(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(ParishionerRepository, "create_profile", fail_profile)
    monkeypatch.setattr(AccountRepository, "delete_by_id", fail_delete)

    with caplog.at_level(logging.WARNING):
        with pytest.raises(ProvisioningFailedException):
            await _service(uow_factory).register_parishioner(
                _account("orphan@stjude.org", parish_id)
            )

    critical = [r for r in caplog.records if r.levelno == logging.CRITICAL]
    assert critical
    assert "orphan@stjude.org" in critical[0].getMessage()
    # The account survives as an orphan; the role edge was still removed.
    assert await _count(session_factory, Account) == 1
    assert await _count(session_factory, UserRole) == 0


@pytest.mark.usefixtures("seeded")
async def test_parish_with_admin(uow_factory, session_factory) -> None:
    svc = ParishService(uow_factory, _service(uow_factory))
    result = await svc.create_parish_with_admin(
        ParishCreate(name="Holy Cross"),
        _account("priest@holycross.org", None, password=None),
    )
    assert result.admin.role_code == "CHURCH_ADMIN"
    assert result.admin.account.is_tenant_admin
    assert result.admin.account.parish_id == result.parish.id
    assert result.admin.profile.is_primary_admin


@pytest.mark.usefixtures("seeded")
async def test_parish_scoped_caller_cannot_create_parish(
    uow_factory, session_factory, parish_id
) -> None:
    svc = ParishService(uow_factory, _service(uow_factory))
    with pytest.raises(AuthorizationException):
        await svc.create_parish_with_admin(
            ParishCreate(name="Holy Cross"),
            _account("priest@holycross.org", None),
            tenant_id=parish_id,
        )
    assert await _count(session_factory, Parish) == 1
    assert await _count(session_factory, Account) == 0


@pytest.mark.usefixtures("seeded")
async def test_parish_removed_when_admin_provisioning_fails(
    uow_factory, session_factory, monkeypatch
) -> None:
    async def fail(*args, **kwargs):
        raise RuntimeError("profile insert failed")

    monkeypatch.setattr(ChurchAdminRepository, "create_profile", fail)
    svc = ParishService(uow_factory, _service(uow_factory))

    with pytest.raises(ProvisioningFailedException):
        await svc.create_parish_with_admin(
            ParishCreate(name="Holy Cross"), _account("priest@holycross.org", None)
        )
    assert await _count(session_factory, Parish) == 0
    assert await _count(session_factory, Account) == 0


@pytest.mark.usefixtures("seeded")
async def test_remove_parishioner_updates_ward_counts(
    uow_factory, session_factory, parish_id
) -> None:
    async with session_factory() as session:
        async with session.begin():
            ward = await WardRepository(session).create_ward(parish_id, "Ward 7", "7")

    svc = _service(uow_factory)
    result = await svc.create_parishioner(
        _account("counted@stjude.org", parish_id), ParishionerProfile(ward_id=ward.id)
    )
    async with session_factory() as session:
        assert (await session.get(Ward, ward.id)).total_members == 1

    await svc.remove_parishioner(result.profile.id, parish_id)
    async with session_factory() as session:
        assert (await session.get(Ward, ward.id)).total_members == 0
        account = await AccountRepository(session).get_by_id(result.account.id)
        assert account.status == "inactive"
