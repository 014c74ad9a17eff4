"""Permission catalog and system role seeding (idempotent).

The seeder is the only caller allowed to create roles flagged
is_system_role; it goes through RoleService.create(seed=True).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TypedDict

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import RoleCreate
from app.application.services.role_service import RoleService
from app.domain.roles import SystemRoles, WardRoles
from app.infrastructure.persistence.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
)

logger = logging.getLogger(__name__)


class RoleData(TypedDict):
    """Role configuration for seeded global roles."""

    name: str
    description: str
    priority: int
    permissions: list[str]


SYSTEM_PERMISSIONS: list[tuple[str, str, str, str]] = [
    ("roles.view", "roles", "view", "View roles"),
    ("roles.create", "roles", "create", "Create custom roles"),
    ("roles.update", "roles", "update", "Update custom roles and their permissions"),
    ("roles.delete", "roles", "delete", "Deactivate custom roles"),
    ("roles.assign", "roles", "assign", "Assign and remove roles for accounts"),
    ("permissions.view", "permissions", "view", "View the permission catalog"),
    ("permissions.manage", "permissions", "manage", "Grant/revoke overrides, toggle catalog entries"),
    ("users.view", "users", "view", "View accounts and their access"),
    ("users.create", "users", "create", "Create accounts"),
    ("users.update", "users", "update", "Update accounts"),
    ("users.deactivate", "users", "deactivate", "Deactivate accounts"),
    ("parishes.view", "parishes", "view", "View parish details"),
    ("parishes.create", "parishes", "create", "Create parishes with their primary admin"),
    ("parishes.update", "parishes", "update", "Update parish details"),
    ("wards.view", "wards", "view", "View wards"),
    ("wards.manage", "wards", "manage", "Create and update wards"),
    ("families.view", "families", "view", "View families"),
    ("families.manage", "families", "manage", "Create and update families"),
    ("families.bulk_create", "families", "bulk_create", "Bulk-create families with members"),
    ("parishioners.view", "parishioners", "view", "View parishioners"),
    ("parishioners.create", "parishioners", "create", "Register parishioners"),
    ("parishioners.update", "parishioners", "update", "Update parishioner profiles"),
    ("parishioners.delete", "parishioners", "delete", "Remove parishioners"),
    ("events.view", "events", "view", "View parish events"),
    ("events.create", "events", "create", "Create parish events"),
    ("events.update", "events", "update", "Update parish events"),
    ("events.delete", "events", "delete", "Delete parish events"),
    ("prayer_requests.view", "prayer_requests", "view", "View prayer requests"),
    ("prayer_requests.create", "prayer_requests", "create", "Submit prayer requests"),
    ("prayer_requests.manage", "prayer_requests", "manage", "Moderate prayer requests"),
    ("maintenance.run", "maintenance", "run", "Run maintenance jobs (expiry cleanup)"),
]

_WARD_READ = ["wards.view", "families.view", "parishioners.view", "events.view"]

SYSTEM_ROLES: dict[str, RoleData] = {
    SystemRoles.SUPER_ADMIN: {
        "name": "Super Administrator",
        "description": "Full system access across all parishes",
        "priority": 1000,
        "permissions": ["*"],
    },
    SystemRoles.CHURCH_ADMIN: {
        "name": "Church Administrator",
        "description": "Parish-level administration",
        "priority": 900,
        "permissions": [
            "roles.*",
            "permissions.*",
            "users.*",
            "parishes.view",
            "parishes.update",
            "wards.*",
            "families.*",
            "parishioners.*",
            "events.*",
            "prayer_requests.*",
        ],
    },
    SystemRoles.FAMILY_MEMBER: {
        "name": "Family Member",
        "description": "Default role for parishioners",
        "priority": 100,
        "permissions": [
            "families.view",
            "events.view",
            "prayer_requests.view",
            "prayer_requests.create",
        ],
    },
}

WARD_ROLES: dict[str, RoleData] = {
    WardRoles.CONVENER: {
        "name": "Ward Convener",
        "description": "Leads the ward",
        "priority": 500,
        "permissions": [*_WARD_READ, "events.create", "events.update", "families.manage"],
    },
    WardRoles.SECRETARY: {
        "name": "Ward Secretary",
        "description": "Keeps ward records",
        "priority": 450,
        "permissions": [*_WARD_READ, "events.create", "parishioners.update"],
    },
    WardRoles.TREASURER: {
        "name": "Ward Treasurer",
        "description": "Manages ward finances",
        "priority": 440,
        "permissions": list(_WARD_READ),
    },
    WardRoles.PRAYER_COORDINATOR: {
        "name": "Ward Prayer Coordinator",
        "description": "Coordinates ward prayer meetings",
        "priority": 400,
        "permissions": [*_WARD_READ, "events.create", "prayer_requests.*"],
    },
    WardRoles.YOUTH_LEADER: {
        "name": "Ward Youth Leader",
        "description": "Leads ward youth activities",
        "priority": 400,
        "permissions": [*_WARD_READ, "events.create"],
    },
    WardRoles.CATECHISM_TEACHER: {
        "name": "Ward Catechism Teacher",
        "description": "Teaches catechism in the ward",
        "priority": 350,
        "permissions": list(_WARD_READ),
    },
    WardRoles.SOCIAL_SERVICE: {
        "name": "Ward Social Service",
        "description": "Coordinates ward social service",
        "priority": 350,
        "permissions": [*_WARD_READ, "prayer_requests.view"],
    },
    WardRoles.FAMILY_APOSTOLATE: {
        "name": "Ward Family Apostolate",
        "description": "Supports families in the ward",
        "priority": 350,
        "permissions": [*_WARD_READ, "families.manage"],
    },
    WardRoles.CHOIR_LEADER: {
        "name": "Ward Choir Leader",
        "description": "Leads the ward choir",
        "priority": 300,
        "permissions": [*_WARD_READ, "events.create"],
    },
    WardRoles.SACRISTAN: {
        "name": "Ward Sacristan",
        "description": "Prepares liturgical celebrations",
        "priority": 300,
        "permissions": ["wards.view", "events.view"],
    },
}


@dataclass(frozen=True)
class SeedResult:
    permissions_created: int
    roles_created: int
    bindings_created: int


def resolve_permission_pattern(pattern: str, codes: list[str]) -> list[str]:
    """Expand '*' (every code) and 'module.*' (every code in module)."""
    if pattern == "*":
        return list(codes)
    if pattern.endswith(".*"):
        prefix = pattern[:-1]
        return [c for c in codes if c.startswith(prefix)]
    return [pattern] if pattern in codes else []


class CatalogSeeder:
    """Inserts missing permissions, global system roles and their bindings."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self._permission_repo = PermissionRepository(db)
        self._role_repo = RoleRepository(db)
        self._role_permission_repo = RolePermissionRepository(db)
        self._role_service = RoleService(
            self._role_repo, self._permission_repo, self._role_permission_repo
        )

    async def seed(self) -> SeedResult:
        """Idempotent: existing rows are kept, only missing ones are inserted."""
        permissions_created = 0
        permission_ids: dict[str, str] = {}
        for code, module, action, description in SYSTEM_PERMISSIONS:
            perm = await self._permission_repo.get_by_code(code)
            if perm is None:
                perm = await self._permission_repo.create_permission(
                    code=code,
                    name=description,
                    module=module,
                    action=action,
                    description=description,
                )
                permissions_created += 1
            permission_ids[code] = perm.id

        roles_created = 0
        bindings_created = 0
        codes = list(permission_ids)
        for role_code, data in {**SYSTEM_ROLES, **WARD_ROLES}.items():
            role = await self._role_repo.get_by_code(role_code)
            if role is None:
                role = await self._role_service.create(
                    RoleCreate(
                        code=role_code,
                        name=data["name"],
                        description=data["description"],
                        priority=data["priority"],
                        is_system_role=True,
                    ),
                    seed=True,
                )
                roles_created += 1
            bound = await self._role_permission_repo.get_permission_ids_for_role(role.id)
            for pattern in data["permissions"]:
                for code in resolve_permission_pattern(pattern, codes):
                    pid = permission_ids[code]
                    if pid in bound:
                        continue
                    await self._role_permission_repo.bind(role.id, pid)
                    bound.add(pid)
                    bindings_created += 1

        logger.info(
            "RBAC catalog seeded: %d permissions, %d roles, %d bindings created",
            permissions_created,
            roles_created,
            bindings_created,
        )
        return SeedResult(permissions_created, roles_created, bindings_created)
