"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    families,
    health,
    maintenance,
    parishes,
    parishioners,
    permissions,
    roles,
    user_access,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
api_router.include_router(user_access.router, prefix="/users", tags=["user-access"])
api_router.include_router(parishes.router, prefix="/parishes", tags=["parishes"])
api_router.include_router(
    parishioners.router, prefix="/parishioners", tags=["parishioners"]
)
api_router.include_router(families.router, prefix="/families", tags=["families"])
api_router.include_router(
    maintenance.router, prefix="/maintenance", tags=["maintenance"]
)
