"""Current-account and tenant-scope dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.account import AccountResult
from app.application.dtos.mappers import account_to_result
from app.domain.enums import AccountKind
from app.domain.exceptions import AuthenticationException
from app.infrastructure.persistence.repositories import AccountRepository
from app.infrastructure.security.jwt import verify_token
from app.shared.context import set_current_user

from .db import get_account_repo

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_account_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
) -> AccountResult | None:
    """Return the account named by the bearer token, or None (missing/invalid/inactive)."""
    if not credentials:
        return None
    try:
        claims = verify_token(credentials.credentials)
    except ValueError:
        return None
    account = await account_repo.get_by_id(claims.account_id)
    if account is None or account.status != "active":
        return None
    return account_to_result(account)


async def get_current_account(
    account: Annotated[AccountResult | None, Depends(get_current_account_optional)],
) -> AccountResult:
    """Return the authenticated account and record it as the acting user; 401 otherwise."""
    if account is None:
        raise AuthenticationException("Not authenticated")
    set_current_user(account.id)
    return account


def tenant_scope(account: AccountResult) -> str | None:
    """Parish the account acts in; None for platform administrators (global scope)."""
    if account.kind == AccountKind.SUPER_ADMIN.value:
        return None
    return account.parish_id


def get_tenant_scope(
    account: Annotated[AccountResult, Depends(get_current_account)],
) -> str | None:
    return tenant_scope(account)
