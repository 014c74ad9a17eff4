"""Families API: bulk family provisioning (interactive and CSV import)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_bulk_family_service,
    get_tenant_scope,
    require_permission,
)
from app.application.dtos.account import AccountResult
from app.application.dtos.provisioning import FamilySpec, MemberSpec, WardSpec
from app.application.services import BulkFamilyService
from app.core.limiter import limit_bulk
from app.domain.enums import BulkMode
from app.domain.exceptions import ValidationException
from app.schemas.family import (
    BulkFamilyRequest,
    BulkFamilyResponse,
    BulkImportRequest,
    BulkImportResponse,
)

router = APIRouter()


def _parish_for(tenant_id: str | None, requested: str | None) -> str:
    parish_id = tenant_id if tenant_id is not None else requested
    if not parish_id:
        raise ValidationException("parish_id is required", field="parish_id")
    return parish_id


@router.post("/bulk", response_model=BulkFamilyResponse, status_code=201)
@limit_bulk
async def bulk_create_family(
    request: Request,
    body: BulkFamilyRequest,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    bulk_service: Annotated[BulkFamilyService, Depends(get_bulk_family_service)],
    _: Annotated[AccountResult, Depends(require_permission("families.bulk_create"))],
):
    """Create a family with its members in one transaction (all or nothing)."""
    ward = WardSpec(**body.ward.model_dump()) if body.ward is not None else None
    result = await bulk_service.provision_family(
        _parish_for(tenant_id, body.parish_id),
        ward,
        FamilySpec(**body.family.model_dump()),
        [
            MemberSpec(**m.model_dump(), row=index + 1)
            for index, m in enumerate(body.members)
        ],
        BulkMode.TRANSACTIONAL,
    )
    return BulkFamilyResponse.model_validate(result)


@router.post("/bulk-import", response_model=BulkImportResponse)
@limit_bulk
async def bulk_import_families(
    request: Request,
    body: BulkImportRequest,
    tenant_id: Annotated[str | None, Depends(get_tenant_scope)],
    bulk_service: Annotated[BulkFamilyService, Depends(get_bulk_family_service)],
    _: Annotated[AccountResult, Depends(require_permission("families.bulk_create"))],
):
    """Import CSV-shaped rows; invalid rows are reported and skipped."""
    result = await bulk_service.import_rows(
        _parish_for(tenant_id, body.parish_id), body.rows
    )
    return BulkImportResponse.model_validate(result)
