"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.account import Account
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    DomainModel,
    ParishScopedMixin,
    StatusMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.parish import Family, Parish, Ward
from app.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserPermission,
    UserRole,
)
from app.infrastructure.persistence.models.profile import ChurchAdmin, Parishioner
from app.infrastructure.persistence.models.role import Role

__all__ = [
    "Account",
    "ChurchAdmin",
    "CuidMixin",
    "DomainModel",
    "Family",
    "Parish",
    "ParishScopedMixin",
    "Parishioner",
    "Permission",
    "Role",
    "RolePermission",
    "StatusMixin",
    "TimestampMixin",
    "UserPermission",
    "UserRole",
    "Ward",
]
