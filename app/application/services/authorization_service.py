"""Authorization service: permission guards over the resolver.

Tenant administrators short-circuit to allowed before any resolver query
(EffectiveAccess is Unrestricted); everyone else is checked against the
codes resolved for this request. Nothing is cached, so expiry and revocation
take effect on the next request.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.application.dtos.account import AccountResult
from app.application.dtos.permission import PermissionResult
from app.application.interfaces.services import IPermissionResolver
from app.domain.exceptions import AuthorizationException
from app.domain.value_objects.access import EffectiveAccess, Unrestricted


class AuthorizationService:
    """Centralized permission checking for the guards and /auth/me."""

    def __init__(self, permission_resolver: IPermissionResolver) -> None:
        self.permission_resolver = permission_resolver

    async def get_access(self, account: AccountResult) -> EffectiveAccess:
        if account.is_tenant_admin:
            return Unrestricted()
        return await self.permission_resolver.access_for(account)

    async def check_permission(self, account: AccountResult, code: str) -> bool:
        """Return True if the account holds code (single-row query)."""
        if account.is_tenant_admin:
            return True
        return await self.permission_resolver.check(account.id, code)

    async def require_permission(self, account: AccountResult, code: str) -> None:
        """Raise AuthorizationException naming code if the account lacks it."""
        if not await self.check_permission(account, code):
            raise AuthorizationException([code], mode="one")

    async def require_any_permission(
        self, account: AccountResult, codes: Iterable[str]
    ) -> None:
        """Raise unless the account holds at least one of codes."""
        codes = list(codes)
        access = await self.get_access(account)
        if not access.allows_any(codes):
            raise AuthorizationException(codes, mode="any")

    async def require_all_permissions(
        self, account: AccountResult, codes: Iterable[str]
    ) -> None:
        """Raise naming every missing code unless the account holds all of codes."""
        access = await self.get_access(account)
        missing = access.missing(list(codes))
        if missing:
            raise AuthorizationException(missing, mode="all")

    async def effective_permissions(self, account: AccountResult) -> list[PermissionResult]:
        """Full active catalog for tenant administrators, resolved set otherwise."""
        if account.is_tenant_admin:
            return await self.permission_resolver.catalog()
        return await self.permission_resolver.resolve(account.id)
