"""Parishioners API: staff-created parishioners and their removal."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import (
    get_provisioning_service,
    get_tenant_scope,
    require_permission,
)
from app.application.dtos.account import AccountCreate, AccountResult
from app.application.dtos.parish import ParishionerProfile
from app.application.services import ProvisioningService
from app.core.limiter import limit_writes
from app.domain.exceptions import ValidationException
from app.schemas.parish import ParishionerCreateRequest, ProvisionResponse

router = APIRouter()


@router.post("", response_model=ProvisionResponse, status_code=201)
@limit_writes
async def create_parishioner(
    request: Request,
    body: ParishionerCreateRequest,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    provisioning: Annotated[ProvisioningService, Depends(get_provisioning_service)],
    _: Annotated[AccountResult, Depends(require_permission("parishioners.create"))],
):
    """Provision account, FAMILY_MEMBER role and parishioner profile.

    A generated temporary password is returned once in the response.
    """
    result = await provisioning.create_parishioner(
        AccountCreate(
            email=body.email,
            first_name=body.first_name,
            last_name=body.last_name,
            phone=body.phone,
            password=body.password,
            parish_id=body.parish_id,
        ),
        ParishionerProfile(
            ward_id=body.ward_id,
            family_id=body.family_id,
            middle_name=body.middle_name,
            date_of_birth=body.date_of_birth,
            gender=body.gender,
            occupation=body.occupation,
            address_line1=body.address_line1,
            address_line2=body.address_line2,
            city=body.city,
            postal_code=body.postal_code,
        ),
        tenant_id=tenant_id,
    )
    return ProvisionResponse.model_validate(result)


@router.delete("/{parishioner_id}", status_code=204)
@limit_writes
async def remove_parishioner(
    request: Request,
    parishioner_id: str,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    provisioning: Annotated[ProvisioningService, Depends(get_provisioning_service)],
    _: Annotated[AccountResult, Depends(require_permission("parishioners.delete"))],
    parish_id: str | None = None,
) -> Response:
    """Deactivate the parishioner and their account; ward counters are recomputed."""
    scope = tenant_id if tenant_id is not None else parish_id
    if scope is None:
        raise ValidationException("parish_id is required", field="parish_id")
    await provisioning.remove_parishioner(parishioner_id, scope)
    return Response(status_code=204)
