"""Bulk family provisioning and CSV-shaped import against SQLite."""

import pytest
from sqlalchemy import func, select

from app.application.dtos.provisioning import FamilySpec, MemberSpec, WardSpec
from app.application.services.bulk_family_service import BulkFamilyService
from app.domain.enums import BulkMode
from app.domain.exceptions import ProvisioningFailedException, ValidationException
from app.infrastructure.persistence.models.account import Account
from app.infrastructure.persistence.models.parish import Family, Ward
from app.infrastructure.persistence.models.profile import Parishioner
from app.infrastructure.persistence.repositories import ParishionerRepository
from app.infrastructure.security.password import hash_password

pytestmark = pytest.mark.usefixtures("seeded")


def _service(uow_factory, **kwargs) -> BulkFamilyService:
    return BulkFamilyService(uow_factory, hash_password, **kwargs)


def _member(first: str, email: str | None, **kwargs) -> MemberSpec:
    return MemberSpec(first_name=first, last_name="Ssempa", email=email, **kwargs)


async def _count(session_factory, model) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def test_transactional_creates_ward_family_and_members(
    uow_factory, session_factory, parish_id
) -> None:
    result = await _service(uow_factory).provision_family(
        parish_id,
        WardSpec(ward_number="3", name="St. Kizito"),
        FamilySpec(family_name="Ssempa"),
        [
            _member("Joseph", "joseph@ssempa.ug"),
            _member("Ruth", "ruth@ssempa.ug", is_primary_contact=True),
        ],
    )

    assert result.errors == []
    assert len(result.created_members) == 2
    assert result.family.ward_id == result.ward.id
    assert result.ward.total_families == 1
    assert result.ward.total_members == 2
    ruth = result.created_members[1].account
    assert result.family.primary_contact_id == ruth.id
    assert all(m.temporary_password for m in result.created_members)


async def test_transactional_rejects_any_invalid_member(
    uow_factory, session_factory, parish_id
) -> None:
    with pytest.raises(ValidationException):
        await _service(uow_factory).provision_family(
            parish_id,
            None,
            FamilySpec(family_name="Ssempa"),
            [_member("Joseph", "joseph@ssempa.ug"), _member("Ruth", "not-an-email")],
        )
    assert await _count(session_factory, Account) == 0
    assert await _count(session_factory, Family) == 0


async def test_transactional_storage_failure_rolls_back_everything(
    uow_factory, session_factory, parish_id, monkeypatch
) -> None:
    original = ParishionerRepository.create_profile
    calls = 0

    async def fail_second(self, *args, **kwargs):
        nonlocal calls
        calls += 1
        if calls == 2:
            raise RuntimeError("insert failed")
        return await original(self, *args, **kwargs)

    monkeypatch.setattr(ParishionerRepository, "create_profile", fail_second)

    with pytest.raises(ProvisioningFailedException):
        await _service(uow_factory).provision_family(
            parish_id,
            WardSpec(ward_number="4"),
            FamilySpec(family_name="Ssempa"),
            [_member("Joseph", "joseph@ssempa.ug"), _member("Ruth", "ruth@ssempa.ug")],
        )
    for model in (Account, Family, Ward, Parishioner):
        assert await _count(session_factory, model) == 0


async def test_batch_skips_invalid_members(uow_factory, session_factory, parish_id) -> None:
    result = await _service(uow_factory).provision_family(
        parish_id,
        None,
        FamilySpec(family_name="Ssempa"),
        [
            _member("Joseph", "joseph@ssempa.ug", row=2),
            _member("Ruth", "joseph@ssempa.ug", row=3),
            _member("", "nameless@ssempa.ug", row=4),
            _member("Peter", "peter@ssempa.ug", password="short", row=5),
        ],
        BulkMode.BATCH,
    )
    assert [m.account.email for m in result.created_members] == ["joseph@ssempa.ug"]
    assert [(e.row, e.error) for e in result.errors] == [
        (3, "Duplicate email in batch: joseph@ssempa.ug"),
        (4, "first_name is required"),
        (5, "password must be at least 8 characters"),
    ]


async def test_batch_emails_follow_login_validation(uow_factory, parish_id) -> None:
    result = await _service(uow_factory).provision_family(
        parish_id,
        None,
        FamilySpec(family_name="Ssempa"),
        [
            _member("Joseph", "  Joseph@Ssempa.UG ", row=2),
            _member("Ruth", "ruth@ssempa..ug", row=3),
            _member("Peter", "peter@ssempa", row=4),
        ],
        BulkMode.BATCH,
    )
    assert [m.account.email for m in result.created_members] == ["joseph@ssempa.ug"]
    assert [(e.row, e.error) for e in result.errors] == [
        (3, "Invalid email: ruth@ssempa..ug"),
        (4, "Invalid email: peter@ssempa"),
    ]


async def test_family_in_other_ward_requires_update_ward(uow_factory, parish_id) -> None:
    svc = _service(uow_factory)
    await svc.provision_family(
        parish_id, WardSpec(ward_number="1"), FamilySpec(family_name="Okello"),
        [_member("Anna", "anna@okello.ug")],
    )
    with pytest.raises(ValidationException):
        await svc.provision_family(
            parish_id, WardSpec(ward_number="2"), FamilySpec(family_name="Okello"),
            [_member("Paul", "paul@okello.ug")],
        )

    moved = await svc.provision_family(
        parish_id,
        WardSpec(ward_number="2"),
        FamilySpec(family_name="okello", update_ward=True),
        [_member("Paul", "paul@okello.ug")],
    )
    assert moved.ward.ward_number == "2"
    # Only the family moves; existing members keep their ward.
    assert moved.ward.total_members == 1
    assert moved.ward.total_families == 1


async def test_import_rows_groups_by_family_and_numbers_rows(
    uow_factory, session_factory, parish_id
) -> None:
    rows = [
        {"family_name": "Ssempa", "first_name": "Joseph", "last_name": "Ssempa",
         "email": "joseph@ssempa.ug", "ward_number": "5"},
        {"family_name": "Okello", "first_name": "Anna", "last_name": "Okello",
         "email": "anna@okello.ug"},
        {"family_name": "ssempa", "first_name": "Ruth", "last_name": "Ssempa",
         "email": "ruth@ssempa.ug", "date_of_birth": "31/12/1990"},
        {"family_name": "", "first_name": "No", "last_name": "Family",
         "email": "nofamily@x.ug"},
        {"family_name": "Okello", "first_name": "Paul", "last_name": "Okello",
         "email": "anna@okello.ug"},
    ]
    result = await _service(uow_factory).import_rows(parish_id, rows)

    assert result.total_families == 2
    assert result.total_members == 2
    top_level = {(e.row, e.error.split(":")[0]) for e in result.errors}
    assert top_level == {(4, "Invalid date_of_birth"), (5, "family_name is required")}
    family_errors = [e for f in result.families for e in f.errors]
    assert [(e.row, e.email) for e in family_errors] == [(6, "anna@okello.ug")]
    assert result.total_errors == 3


async def test_import_rejects_oversized_batch(uow_factory, parish_id) -> None:
    svc = _service(uow_factory, max_import_rows=2)
    with pytest.raises(ValidationException):
        await svc.import_rows(parish_id, [{"family_name": "A"}] * 3)


async def test_member_limit(uow_factory, parish_id) -> None:
    svc = _service(uow_factory, max_members=1)
    with pytest.raises(ValidationException):
        await svc.provision_family(
            parish_id, None, FamilySpec(family_name="Big"),
            [_member("A", "a@big.ug"), _member("B", "b@big.ug")],
        )
