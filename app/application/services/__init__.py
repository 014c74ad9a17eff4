"""Application services: catalog, roles, assignments, authorization, provisioning."""

from app.application.services.assignment_service import AssignmentService
from app.application.services.auth_service import AuthService
from app.application.services.authorization_service import AuthorizationService
from app.application.services.bulk_family_service import BulkFamilyService
from app.application.services.parish_service import ParishService
from app.application.services.permission_service import PermissionService
from app.application.services.provisioning_saga import (
    IllegalSagaTransition,
    ProvisioningSaga,
)
from app.application.services.provisioning_service import ProvisioningService
from app.application.services.role_service import RoleService

__all__ = [
    "AssignmentService",
    "AuthService",
    "AuthorizationService",
    "BulkFamilyService",
    "IllegalSagaTransition",
    "ParishService",
    "PermissionService",
    "ProvisioningSaga",
    "ProvisioningService",
    "RoleService",
]
