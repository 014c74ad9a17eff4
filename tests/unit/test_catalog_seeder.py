"""Catalog definition and permission pattern expansion."""

from app.domain.roles import SystemRoles, WardRoles, default_role_for_kind
from app.domain.value_objects import PermissionCode
from app.infrastructure.services.catalog_seeder import (
    SYSTEM_PERMISSIONS,
    SYSTEM_ROLES,
    WARD_ROLES,
    resolve_permission_pattern,
)

CODES = [code for code, _, _, _ in SYSTEM_PERMISSIONS]


def test_catalog_codes_are_well_formed_and_unique() -> None:
    assert len(CODES) == len(set(CODES))
    for code, module, action, _ in SYSTEM_PERMISSIONS:
        parsed = PermissionCode(code)
        assert (parsed.module, parsed.action) == (module, action)


def test_star_expands_to_full_catalog() -> None:
    assert resolve_permission_pattern("*", CODES) == CODES


def test_module_wildcard_expands_to_module_codes() -> None:
    assert resolve_permission_pattern("roles.*", CODES) == [
        "roles.view",
        "roles.create",
        "roles.update",
        "roles.delete",
        "roles.assign",
    ]


def test_unknown_code_expands_to_nothing() -> None:
    assert resolve_permission_pattern("sacraments.view", CODES) == []


def test_family_member_cannot_create_events() -> None:
    granted = {
        code
        for pattern in SYSTEM_ROLES[SystemRoles.FAMILY_MEMBER]["permissions"]
        for code in resolve_permission_pattern(pattern, CODES)
    }
    assert "events.view" in granted
    assert "events.create" not in granted


def test_every_role_pattern_resolves() -> None:
    for data in {**SYSTEM_ROLES, **WARD_ROLES}.values():
        for pattern in data["permissions"]:
            assert resolve_permission_pattern(pattern, CODES), pattern


def test_default_role_for_kind() -> None:
    assert default_role_for_kind("parishioner") == SystemRoles.FAMILY_MEMBER
    assert default_role_for_kind("church_admin") == SystemRoles.CHURCH_ADMIN
    assert default_role_for_kind("unknown") == SystemRoles.FAMILY_MEMBER
    assert WardRoles.CONVENER in WARD_ROLES
