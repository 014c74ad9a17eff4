"""Domain value objects and shared value types."""

from app.domain.value_objects.access import EffectiveAccess, Scoped, Unrestricted
from app.domain.value_objects.core import PermissionCode, RoleCode

__all__ = [
    "EffectiveAccess",
    "PermissionCode",
    "RoleCode",
    "Scoped",
    "Unrestricted",
]
