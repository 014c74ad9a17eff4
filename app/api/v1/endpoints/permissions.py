"""Permission catalog API: list, group by module, toggle status."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_permission_service,
    require_permission,
    tenant_scope,
)
from app.application.dtos.account import AccountResult
from app.application.services import PermissionService
from app.core.limiter import limit_writes
from app.domain.exceptions import AuthorizationException
from app.schemas.permission import (
    PermissionModuleResponse,
    PermissionResponse,
    PermissionStatusUpdate,
)

router = APIRouter()


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
    _: Annotated[AccountResult, Depends(require_permission("permissions.view"))],
    module: str | None = None,
    include_inactive: bool = False,
):
    perms = await permission_service.list_permissions(
        module=module, include_inactive=include_inactive
    )
    return [PermissionResponse.model_validate(p) for p in perms]


@router.get("/modules", response_model=list[PermissionModuleResponse])
async def list_permission_modules(
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
    _: Annotated[AccountResult, Depends(require_permission("permissions.view"))],
):
    """Active permissions grouped by module."""
    modules = await permission_service.list_modules()
    return [PermissionModuleResponse.model_validate(m) for m in modules]


@router.patch("/{permission_id}/status", response_model=PermissionResponse)
@limit_writes
async def set_permission_status(
    request: Request,
    permission_id: str,
    body: PermissionStatusUpdate,
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
    account: Annotated[AccountResult, Depends(require_permission("permissions.manage"))],
):
    """Activate or deactivate a catalog entry (platform administrators only).

    The catalog is global, so a parish-scoped caller cannot change it.
    """
    if tenant_scope(account) is not None:
        raise AuthorizationException(
            message="The permission catalog can only be changed by a platform administrator"
        )
    perm = await permission_service.set_status(permission_id, body.status)
    return PermissionResponse.model_validate(perm)
