"""Parish onboarding, staff-created parishioners, bulk families and maintenance."""

import pytest
from httpx import AsyncClient

from app.domain.enums import AccountKind
from app.domain.roles import SystemRoles

pytestmark = pytest.mark.usefixtures("seeded")


@pytest.fixture
async def super_admin(make_account):
    return await make_account(
        "root@diocese.org", kind=AccountKind.SUPER_ADMIN, role_code=SystemRoles.SUPER_ADMIN
    )


@pytest.fixture
async def admin(make_account, parish_id):
    return await make_account(
        "admin@stjude.org",
        parish_id=parish_id,
        kind=AccountKind.CHURCH_ADMIN,
        role_code=SystemRoles.CHURCH_ADMIN,
        is_tenant_admin=True,
    )


async def test_church_admin_cannot_create_parish(client: AsyncClient, admin, bearer) -> None:
    response = await client.post(
        "/api/v1/parishes",
        json={
            "name": "St. Peter",
            "admin": {
                "email": "priest@stpeter.org",
                "first_name": "Fr. Paul",
                "last_name": "Okot",
                "password": "CorrectHorse9!",
            },
        },
        headers=bearer(admin),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"

    login = await client.post(
        "/api/v1/auth/login",
        json={"email": "priest@stpeter.org", "password": "CorrectHorse9!"},
    )
    assert login.status_code == 401


async def test_super_admin_creates_parish_with_admin(
    client: AsyncClient, super_admin, bearer
) -> None:
    response = await client.post(
        "/api/v1/parishes",
        json={
            "name": "Our Lady of Africa",
            "diocese": "Kampala",
            "admin": {
                "email": "priest@ourlady.org",
                "first_name": "Fr. John",
                "last_name": "Kato",
                "role_title": "Parish Priest",
            },
        },
        headers=bearer(super_admin),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["admin"]["role_code"] == "CHURCH_ADMIN"
    assert body["admin"]["account"]["parish_id"] == body["parish"]["id"]
    assert body["admin"]["temporary_password"]

    login = await client.post(
        "/api/v1/auth/login",
        json={
            "email": "priest@ourlady.org",
            "password": body["admin"]["temporary_password"],
        },
    )
    assert login.status_code == 200


async def test_member_cannot_create_parish(
    client: AsyncClient, make_account, parish_id, bearer
) -> None:
    member = await make_account(
        "member@stjude.org", parish_id=parish_id, role_code=SystemRoles.FAMILY_MEMBER
    )
    response = await client.post(
        "/api/v1/parishes",
        json={
            "name": "X",
            "admin": {"email": "x@x.org", "first_name": "X", "last_name": "Y"},
        },
        headers=bearer(member),
    )
    assert response.status_code == 403


async def test_admin_creates_and_removes_parishioner(
    client: AsyncClient, admin, bearer, parish_id
) -> None:
    headers = bearer(admin)
    created = await client.post(
        "/api/v1/parishioners",
        json={"email": "peter@stjude.org", "first_name": "Peter", "last_name": "Lule"},
        headers=headers,
    )
    assert created.status_code == 201
    body = created.json()
    assert body["account"]["parish_id"] == parish_id
    assert body["role_code"] == "FAMILY_MEMBER"
    assert body["temporary_password"]

    removed = await client.delete(f"/api/v1/parishioners/{body['profile']['id']}", headers=headers)
    assert removed.status_code == 204

    login = await client.post(
        "/api/v1/auth/login",
        json={"email": "peter@stjude.org", "password": body["temporary_password"]},
    )
    assert login.status_code == 401


async def test_bulk_family_is_all_or_nothing(client: AsyncClient, admin, bearer) -> None:
    headers = bearer(admin)
    rejected = await client.post(
        "/api/v1/families/bulk",
        json={
            "ward": {"ward_number": "2", "name": "St. Charles Lwanga"},
            "family": {"family_name": "Mugisha"},
            "members": [
                {"first_name": "Ann", "last_name": "Mugisha", "email": "ann@mugisha.org"},
                {"first_name": "Bob", "last_name": "Mugisha", "email": "ann@mugisha.org"},
            ],
        },
        headers=headers,
    )
    assert rejected.status_code == 400

    accepted = await client.post(
        "/api/v1/families/bulk",
        json={
            "ward": {"ward_number": "2", "name": "St. Charles Lwanga"},
            "family": {"family_name": "Mugisha"},
            "members": [
                {"first_name": "Ann", "last_name": "Mugisha", "email": "ann@mugisha.org"},
                {"first_name": "Bob", "last_name": "Mugisha", "email": "bob@mugisha.org"},
            ],
        },
        headers=headers,
    )
    assert accepted.status_code == 201
    body = accepted.json()
    assert len(body["created_members"]) == 2
    assert body["ward"]["total_members"] == 2
    assert body["ward"]["total_families"] == 1


async def test_bulk_import_reports_row_errors(client: AsyncClient, admin, bearer) -> None:
    response = await client.post(
        "/api/v1/families/bulk-import",
        json={
            "rows": [
                {"family_name": "Opio", "first_name": "Sam", "last_name": "Opio",
                 "email": "sam@opio.org"},
                {"family_name": "Opio", "first_name": "", "last_name": "Opio",
                 "email": "noname@opio.org"},
            ]
        },
        headers=bearer(admin),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_members"] == 1
    assert body["total_errors"] == 1


async def test_expire_assignments(client: AsyncClient, super_admin, bearer) -> None:
    response = await client.post(
        "/api/v1/maintenance/expire-assignments", headers=bearer(super_admin)
    )
    assert response.status_code == 200
    assert response.json()["total"] == 0
