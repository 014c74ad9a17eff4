"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.account_repo import AccountRepository
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.family_repo import FamilyRepository
from app.infrastructure.persistence.repositories.parish_repo import ParishRepository
from app.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from app.infrastructure.persistence.repositories.profile_repo import (
    ChurchAdminRepository,
    ParishionerRepository,
)
from app.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from app.infrastructure.persistence.repositories.role_repo import RoleRepository
from app.infrastructure.persistence.repositories.user_permission_repo import (
    UserPermissionRepository,
)
from app.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
)
from app.infrastructure.persistence.repositories.ward_repo import WardRepository

__all__ = [
    "AccountRepository",
    "BaseRepository",
    "ChurchAdminRepository",
    "FamilyRepository",
    "ParishRepository",
    "ParishionerRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "UserPermissionRepository",
    "UserRoleRepository",
    "WardRepository",
]
