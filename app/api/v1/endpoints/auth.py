"""Auth API: public registration, login and the current account.

Registration runs the provisioning saga for a parishioner (account,
FAMILY_MEMBER role, profile). The JWT is created via infrastructure security.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_assignment_service,
    get_auth_service,
    get_authorization_service,
    get_current_account,
    get_provisioning_service,
)
from app.application.dtos.account import AccountCreate, AccountResult
from app.application.dtos.parish import ParishionerProfile
from app.application.services import (
    AssignmentService,
    AuthorizationService,
    AuthService,
    ProvisioningService,
)
from app.core.limiter import limit_auth, limit_register
from app.infrastructure.security.jwt import create_access_token
from app.schemas.assignment import UserRoleResponse
from app.schemas.auth import (
    AccountResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    TokenResponse,
)
from app.schemas.parish import ProvisionResponse

router = APIRouter()


@router.post("/register", response_model=ProvisionResponse, status_code=201)
@limit_register
async def register(
    request: Request,
    body: RegisterRequest,
    provisioning: Annotated[ProvisioningService, Depends(get_provisioning_service)],
):
    """Register a parishioner in an existing parish (public endpoint)."""
    result = await provisioning.register_parishioner(
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
            date_of_birth=body.date_of_birth,
            gender=body.gender,
        ),
    )
    return ProvisionResponse.model_validate(result)


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Authenticate with e-mail and password; return a bearer JWT."""
    account = await auth_service.authenticate(body.email, body.password)
    token, expires_at = create_access_token(account)
    return TokenResponse(access_token=token, expires_at=expires_at)


@router.get("/me", response_model=MeResponse)
async def get_me(
    account: Annotated[AccountResult, Depends(get_current_account)],
    assignments: Annotated[AssignmentService, Depends(get_assignment_service)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Current account, its active roles and its effective permission codes."""
    roles = await assignments.list_user_roles(account.id)
    perms = await auth_svc.effective_permissions(account)
    return MeResponse(
        account=AccountResponse.model_validate(account),
        roles=[UserRoleResponse.model_validate(r) for r in roles],
        permissions=sorted(p.code for p in perms),
        unrestricted=account.is_tenant_admin,
    )
