"""Pydantic request/response schemas for the API."""

from app.schemas.assignment import PermissionOverrideResponse, UserRoleResponse
from app.schemas.auth import LoginRequest, MeResponse, RegisterRequest, TokenResponse
from app.schemas.family import BulkFamilyRequest, BulkFamilyResponse, BulkImportResponse
from app.schemas.health import HealthResponse
from app.schemas.parish import ParishCreateRequest, ProvisionResponse
from app.schemas.permission import PermissionResponse
from app.schemas.role import RoleCreateRequest, RoleResponse

__all__ = [
    "BulkFamilyRequest",
    "BulkFamilyResponse",
    "BulkImportResponse",
    "HealthResponse",
    "LoginRequest",
    "MeResponse",
    "ParishCreateRequest",
    "PermissionOverrideResponse",
    "PermissionResponse",
    "ProvisionResponse",
    "RegisterRequest",
    "RoleCreateRequest",
    "RoleResponse",
    "TokenResponse",
    "UserRoleResponse",
]
