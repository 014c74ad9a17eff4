"""Permission guards as FastAPI dependency factories.

Each factory returns a dependency that authenticates the caller, checks the
permission code(s) and returns the current account. Failures raise
AuthorizationException (403) naming the missing code(s).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.account import AccountResult
from app.application.services.authorization_service import AuthorizationService
from app.infrastructure.persistence.database import get_db
from app.infrastructure.services.permission_resolver import PermissionResolver

from .auth import get_current_account


async def get_permission_resolver(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PermissionResolver:
    return PermissionResolver(db)


async def get_authorization_service(
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
) -> AuthorizationService:
    """AuthorizationService over the DB resolver (no permission cache)."""
    return AuthorizationService(permission_resolver=resolver)


def require_permission(code: str):
    """Dependency factory: the caller must hold code."""

    async def _require(
        account: Annotated[AccountResult, Depends(get_current_account)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> AccountResult:
        await auth_svc.require_permission(account, code)
        return account

    return _require


def require_any_permission(*codes: str):
    """Dependency factory: the caller must hold at least one of codes."""

    async def _require(
        account: Annotated[AccountResult, Depends(get_current_account)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> AccountResult:
        await auth_svc.require_any_permission(account, list(codes))
        return account

    return _require


def require_all_permissions(*codes: str):
    """Dependency factory: the caller must hold every one of codes."""

    async def _require(
        account: Annotated[AccountResult, Depends(get_current_account)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> AccountResult:
        await auth_svc.require_all_permissions(account, list(codes))
        return account

    return _require
