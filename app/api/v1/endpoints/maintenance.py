"""Maintenance API: jobs a scheduler triggers over HTTP."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_assignment_service, require_permission
from app.application.dtos.account import AccountResult
from app.application.services import AssignmentService
from app.core.limiter import limit_writes
from app.schemas.assignment import ExpiredAssignmentsResponse

router = APIRouter()


@router.post("/expire-assignments", response_model=ExpiredAssignmentsResponse)
@limit_writes
async def expire_assignments(
    request: Request,
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    _: Annotated[AccountResult, Depends(require_permission("maintenance.run"))],
):
    """Mark expired role assignments and overrides inactive."""
    result = await assignments.deactivate_expired()
    return ExpiredAssignmentsResponse.model_validate(result)
