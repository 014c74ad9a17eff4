"""Domain value objects for the parish core.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

# module.action, lowercase with underscores (e.g. events.create, prayer_requests.read).
_PERMISSION_CODE_RE = re.compile(r"^[a-z][a-z0-9_]*\.[a-z][a-z0-9_]*$")
# Upper snake case (e.g. FAMILY_MEMBER, WARD_PRAYER_COORD).
_ROLE_CODE_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")


@dataclass(frozen=True)
class PermissionCode:
    """Value object for a capability token shaped ``module.action``."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Permission code must be a non-empty string")
        if len(self.value) > 128:
            raise ValueError("Permission code must not exceed 128 characters")
        if not _PERMISSION_CODE_RE.match(self.value):
            raise ValueError(
                "Permission code must be 'module.action' in lowercase "
                "(e.g., 'events.create')"
            )

    @property
    def module(self) -> str:
        return self.value.split(".", 1)[0]

    @property
    def action(self) -> str:
        return self.value.split(".", 1)[1]


@dataclass(frozen=True)
class RoleCode:
    """Value object for role code: upper snake case, 2-64 characters."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Role code must be a non-empty string")
        if len(self.value) < 2 or len(self.value) > 64:
            raise ValueError("Role code must be 2-64 characters")
        if not _ROLE_CODE_RE.match(self.value):
            raise ValueError(
                "Role code must be upper snake case (e.g., 'FAMILY_MEMBER')"
            )
