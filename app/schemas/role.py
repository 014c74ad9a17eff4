"""Role API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RoleCreateRequest(BaseModel):
    """Request body for creating a role.

    Tenant callers always create roles in their own parish; a platform
    administrator creates global roles unless parish_id is given.
    """

    code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    priority: int = Field(default=0, ge=0, le=10_000)
    parish_id: str | None = None
    permission_ids: list[str] = Field(default_factory=list, max_length=100)


class RoleUpdateRequest(BaseModel):
    """Request body for updating a role (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    priority: int | None = Field(default=None, ge=0, le=10_000)
    is_active: bool | None = None


class RolePermissionAssign(BaseModel):
    """Request body for binding a permission to a role."""

    permission_id: str


class RoleResponse(BaseModel):
    """Role list/detail response. tenant_id is null for global roles."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str | None
    code: str
    name: str
    description: str | None
    priority: int
    is_system_role: bool
    is_active: bool


class RolePermissionAssignedResponse(BaseModel):
    """Response for POST /roles/{role_id}/permissions (binding created)."""

    role_id: str
    permission_id: str
    permission_code: str
