"""Parishes API: create a parish together with its primary administrator."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_parish_service,
    get_tenant_scope,
    require_permission,
)
from app.application.dtos.account import AccountCreate, AccountResult
from app.application.dtos.parish import ChurchAdminProfile, ParishCreate
from app.application.services import ParishService
from app.core.limiter import limit_writes
from app.schemas.parish import ParishCreateRequest, ParishWithAdminResponse

router = APIRouter()


@router.post("", response_model=ParishWithAdminResponse, status_code=201)
@limit_writes
async def create_parish(
    request: Request,
    body: ParishCreateRequest,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    parish_service: Annotated[ParishService, Depends(get_parish_service)],
    _: Annotated[AccountResult, Depends(require_permission("parishes.create"))],
):
    """Create the parish, then provision its CHURCH_ADMIN (tenant administrator).

    Platform administrators only. If the admin cannot be provisioned the
    parish is removed again.
    """
    admin = body.admin
    result = await parish_service.create_parish_with_admin(
        ParishCreate(
            name=body.name,
            diocese=body.diocese,
            city=body.city,
            country=body.country,
            email=body.email,
            phone=body.phone,
            timezone=body.timezone,
        ),
        AccountCreate(
            email=admin.email,
            first_name=admin.first_name,
            last_name=admin.last_name,
            phone=admin.phone,
            password=admin.password,
        ),
        ChurchAdminProfile(role_title=admin.role_title, department=admin.department),
        tenant_id=tenant_id,
    )
    return ParishWithAdminResponse.model_validate(result)
