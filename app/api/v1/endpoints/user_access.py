"""Per-account access API: role assignments, direct overrides, effective permissions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.v1.dependencies import (
    get_assignment_service,
    get_authorization_service,
    get_tenant_scope,
    require_permission,
)
from app.application.dtos.account import AccountResult
from app.application.services import AssignmentService, AuthorizationService
from app.core.limiter import limit_writes
from app.schemas.assignment import (
    EffectivePermissionsResponse,
    PermissionCheckResponse,
    PermissionOverrideRequest,
    PermissionOverrideResponse,
    UserRoleAssign,
    UserRoleResponse,
)
from app.schemas.permission import PermissionResponse

router = APIRouter()


@router.get("/{user_id}/roles", response_model=list[UserRoleResponse])
async def list_user_roles(
    user_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    _: Annotated[AccountResult, Depends(require_permission("users.view"))],
):
    """Active, unexpired role assignments (priority DESC)."""
    edges = await assignments.list_user_roles(user_id, tenant_id)
    return [UserRoleResponse.model_validate(e) for e in edges]


@router.post("/{user_id}/roles", response_model=UserRoleResponse, status_code=201)
@limit_writes
async def assign_user_role(
    request: Request,
    user_id: str,
    body: UserRoleAssign,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    account: Annotated[AccountResult, Depends(require_permission("roles.assign"))],
):
    """Assign a role. An active, unexpired assignment already present -> 409."""
    edge = await assignments.assign_role(
        user_id,
        body.role_id,
        assigned_by=account.id,
        expires_at=body.expires_at,
        tenant_id=tenant_id,
    )
    return UserRoleResponse.model_validate(edge)


@router.delete("/{user_id}/roles/{role_id}", status_code=204)
@limit_writes
async def remove_user_role(
    request: Request,
    user_id: str,
    role_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    _: Annotated[AccountResult, Depends(require_permission("roles.assign"))],
) -> Response:
    await assignments.remove_role(user_id, role_id, tenant_id)
    return Response(status_code=204)


@router.get("/{user_id}/permissions", response_model=EffectivePermissionsResponse)
async def get_user_permissions(
    user_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    _: Annotated[AccountResult, Depends(require_permission("users.view"))],
):
    """Effective permissions: role grants plus GRANTs minus REVOKEs."""
    target = await assignments.get_account(user_id, tenant_id)
    perms = await auth_svc.effective_permissions(target)
    return EffectivePermissionsResponse(
        user_id=target.id,
        unrestricted=target.is_tenant_admin,
        permissions=[PermissionResponse.model_validate(p) for p in perms],
    )


@router.get("/{user_id}/permissions/check", response_model=PermissionCheckResponse)
async def check_user_permission(
    user_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    _: Annotated[AccountResult, Depends(require_permission("users.view"))],
    code: str = Query(..., min_length=1, max_length=100),
):
    target = await assignments.get_account(user_id, tenant_id)
    allowed = await auth_svc.check_permission(target, code)
    return PermissionCheckResponse(user_id=target.id, permission_code=code, allowed=allowed)


@router.get(
    "/{user_id}/permission-overrides",
    response_model=list[PermissionOverrideResponse],
)
async def list_permission_overrides(
    user_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    _: Annotated[AccountResult, Depends(require_permission("users.view"))],
):
    """Every direct override row (including inactive and expired ones)."""
    overrides = await assignments.list_overrides(user_id, tenant_id)
    return [PermissionOverrideResponse.model_validate(o) for o in overrides]


@router.post(
    "/{user_id}/permissions/grant",
    response_model=PermissionOverrideResponse,
    status_code=201,
)
@limit_writes
async def grant_user_permission(
    request: Request,
    user_id: str,
    body: PermissionOverrideRequest,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    account: Annotated[AccountResult, Depends(require_permission("permissions.manage"))],
):
    override = await assignments.grant_permission(
        user_id,
        body.permission_id,
        assigned_by=account.id,
        reason=body.reason,
        expires_at=body.expires_at,
        tenant_id=tenant_id,
    )
    return PermissionOverrideResponse.model_validate(override)


@router.post(
    "/{user_id}/permissions/revoke",
    response_model=PermissionOverrideResponse,
    status_code=201,
)
@limit_writes
async def revoke_user_permission(
    request: Request,
    user_id: str,
    body: PermissionOverrideRequest,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    account: Annotated[AccountResult, Depends(require_permission("permissions.manage"))],
):
    """REVOKE wins over every role grant and GRANT while it is active."""
    override = await assignments.revoke_permission(
        user_id,
        body.permission_id,
        assigned_by=account.id,
        reason=body.reason,
        expires_at=body.expires_at,
        tenant_id=tenant_id,
    )
    return PermissionOverrideResponse.model_validate(override)


@router.delete("/{user_id}/permission-overrides/{permission_id}", status_code=204)
@limit_writes
async def remove_permission_override(
    request: Request,
    user_id: str,
    permission_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    _: Annotated[AccountResult, Depends(require_permission("permissions.manage"))],
) -> Response:
    await assignments.remove_override(user_id, permission_id, tenant_id)
    return Response(status_code=204)
