"""Role assignment and permission override API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.permission import PermissionResponse


class UserRoleAssign(BaseModel):
    role_id: str
    expires_at: datetime | None = None


class UserRoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role_id: str
    role_code: str
    role_name: str
    priority: int
    assigned_by: str | None
    assigned_at: datetime | None
    expires_at: datetime | None
    status: str


class PermissionOverrideRequest(BaseModel):
    """GRANT or REVOKE one permission for an account, optionally until expires_at."""

    permission_id: str
    reason: str | None = Field(default=None, max_length=500)
    expires_at: datetime | None = None


class PermissionOverrideResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    permission_id: str
    permission_code: str
    permission_type: str
    assigned_by: str | None
    assigned_at: datetime | None
    expires_at: datetime | None
    reason: str | None
    status: str


class EffectivePermissionsResponse(BaseModel):
    user_id: str
    unrestricted: bool
    permissions: list[PermissionResponse]


class PermissionCheckResponse(BaseModel):
    user_id: str
    permission_code: str
    allowed: bool


class ExpiredAssignmentsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_roles: int
    user_permissions: int
    total: int
