"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services (DIP).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.account import AccountResult
    from app.application.dtos.permission import PermissionResult
    from app.domain.value_objects.access import EffectiveAccess


class IPermissionResolver(Protocol):
    """Protocol for resolving effective permissions (single consistent read)."""

    async def resolve(
        self, user_id: str, at: datetime | None = None
    ) -> list[PermissionResult]:
        """Return effective permissions (roles + GRANTs - REVOKEs, active and unexpired)."""

    async def get_user_permissions(
        self, user_id: str, at: datetime | None = None
    ) -> set[str]:
        """Return effective permission codes."""

    async def check(self, user_id: str, code: str, at: datetime | None = None) -> bool:
        """Return True if the user holds code."""

    async def catalog(self) -> list[PermissionResult]:
        """Return every active permission."""

    async def access_for(
        self, account: AccountResult, at: datetime | None = None
    ) -> EffectiveAccess:
        """Unrestricted for tenant administrators, Scoped otherwise."""


class INotificationSink(Protocol):
    """Protocol for fire-and-forget account notifications."""

    async def send_welcome(
        self, account: AccountResult, temporary_password: str | None = None
    ) -> None:
        """Notify a newly provisioned account. May raise; callers log and ignore."""

    async def close(self) -> None:
        """Release transport resources (lifespan shutdown)."""
