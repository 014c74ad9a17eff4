"""Roles API: list, get, create, update, deactivate, role permissions and holders."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import (
    get_role_service,
    get_tenant_scope,
    require_permission,
)
from app.application.dtos.account import AccountResult
from app.application.dtos.role import RoleCreate, RoleUpdate
from app.application.services import RoleService
from app.core.limiter import limit_writes
from app.domain.enums import RecordStatus
from app.schemas.auth import AccountResponse
from app.schemas.permission import PermissionResponse
from app.schemas.role import (
    RoleCreateRequest,
    RolePermissionAssign,
    RolePermissionAssignedResponse,
    RoleResponse,
    RoleUpdateRequest,
)

router = APIRouter()


@router.post("", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreateRequest,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    account: Annotated[AccountResult, Depends(require_permission("roles.create"))],
):
    """Create a custom role. Optionally bind catalog permissions by id."""
    role = await role_service.create(
        RoleCreate(
            code=body.code,
            name=body.name,
            description=body.description,
            priority=body.priority,
            tenant_id=tenant_id if tenant_id is not None else body.parish_id,
        ),
        created_by=account.id,
    )
    for permission_id in body.permission_ids:
        await role_service.bind_permission(
            role.id, permission_id, granted_by=account.id, tenant_id=role.tenant_id
        )
    return RoleResponse.model_validate(role)


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AccountResult, Depends(require_permission("roles.view"))],
    include_inactive: bool = False,
):
    """Global roles plus the caller's parish roles, priority DESC then name."""
    roles = await role_service.list_all(tenant_id, include_inactive=include_inactive)
    return [RoleResponse.model_validate(r) for r in roles]


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AccountResult, Depends(require_permission("roles.view"))],
):
    return RoleResponse.model_validate(await role_service.get_by_id(role_id, tenant_id))


@router.put("/{role_id}", response_model=RoleResponse)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdateRequest,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AccountResult, Depends(require_permission("roles.update"))],
):
    """Update name, description, priority or status. System roles are immutable (403)."""
    status = None
    if body.is_active is not None:
        status = (RecordStatus.ACTIVE if body.is_active else RecordStatus.INACTIVE).value
    role = await role_service.update(
        role_id,
        RoleUpdate(
            name=body.name,
            description=body.description,
            priority=body.priority,
            status=status,
        ),
        tenant_id,
    )
    return RoleResponse.model_validate(role)


@router.delete("/{role_id}", status_code=204)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AccountResult, Depends(require_permission("roles.delete"))],
) -> Response:
    """Deactivate a custom role (soft delete)."""
    await role_service.soft_delete(role_id, tenant_id)
    return Response(status_code=204)


@router.get("/{role_id}/permissions", response_model=list[PermissionResponse])
async def list_role_permissions(
    role_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AccountResult, Depends(require_permission("roles.view"))],
):
    perms = await role_service.get_role_permissions(role_id, tenant_id)
    return [PermissionResponse.model_validate(p) for p in perms]


@router.post(
    "/{role_id}/permissions",
    response_model=RolePermissionAssignedResponse,
    status_code=201,
)
@limit_writes
async def bind_role_permission(
    request: Request,
    role_id: str,
    body: RolePermissionAssign,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    account: Annotated[AccountResult, Depends(require_permission("roles.update"))],
):
    """Bind a permission to a role. Already bound -> 409."""
    perm = await role_service.bind_permission(
        role_id, body.permission_id, granted_by=account.id, tenant_id=tenant_id
    )
    return RolePermissionAssignedResponse(
        role_id=role_id, permission_id=perm.id, permission_code=perm.code
    )


@router.delete("/{role_id}/permissions/{permission_id}", status_code=204)
@limit_writes
async def unbind_role_permission(
    request: Request,
    role_id: str,
    permission_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AccountResult, Depends(require_permission("roles.update"))],
) -> Response:
    await role_service.unbind_permission(role_id, permission_id, tenant_id)
    return Response(status_code=204)


@router.get("/{role_id}/users", response_model=list[AccountResponse])
async def list_role_users(
    role_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[AccountResult, Depends(require_permission("users.view"))],
):
    """Accounts holding the role (active, unexpired assignments)."""
    accounts = await role_service.list_role_users(role_id, tenant_id)
    return [AccountResponse.model_validate(a) for a in accounts]
