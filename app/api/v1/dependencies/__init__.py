"""FastAPI dependencies: sessions, current account, permission guards, services.

Routes depend only on these; no manual repository or service construction.
"""

from app.api.v1.dependencies.auth import (
    get_current_account,
    get_current_account_optional,
    get_tenant_scope,
    tenant_scope,
)
from app.api.v1.dependencies.db import get_uow_factory
from app.api.v1.dependencies.rbac import (
    get_authorization_service,
    get_permission_resolver,
    require_all_permissions,
    require_any_permission,
    require_permission,
)
from app.api.v1.dependencies.services import (
    get_assignment_service,
    get_auth_service,
    get_bulk_family_service,
    get_parish_service,
    get_permission_service,
    get_provisioning_service,
    get_role_service,
)

__all__ = [
    "get_assignment_service",
    "get_auth_service",
    "get_authorization_service",
    "get_bulk_family_service",
    "get_current_account",
    "get_current_account_optional",
    "get_parish_service",
    "get_permission_resolver",
    "get_permission_service",
    "get_provisioning_service",
    "get_role_service",
    "get_tenant_scope",
    "get_uow_factory",
    "require_all_permissions",
    "require_any_permission",
    "require_permission",
    "tenant_scope",
]
