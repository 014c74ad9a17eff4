"""Permission catalog API schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class PermissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    module: str
    action: str
    description: str | None
    status: str


class PermissionModuleResponse(BaseModel):
    """Permissions grouped by module."""

    model_config = ConfigDict(from_attributes=True)

    module: str
    permissions: list[PermissionResponse]


class PermissionStatusUpdate(BaseModel):
    status: Literal["active", "inactive"]
