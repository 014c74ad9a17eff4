"""Domain layer: value objects, enums, role catalog constants and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    AccountKind,
    BulkMode,
    PermissionType,
    RecordStatus,
    SagaState,
)
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AuthenticationException,
    AuthorizationException,
    ConfigurationException,
    DuplicateAssignmentException,
    ParishException,
    ProvisioningFailedException,
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    SystemRoleImmutableException,
    ValidationException,
)
from app.domain.value_objects import (
    EffectiveAccess,
    PermissionCode,
    RoleCode,
    Scoped,
    Unrestricted,
)

__all__ = [
    # Enums
    "AccountKind",
    "BulkMode",
    "PermissionType",
    "RecordStatus",
    "SagaState",
    # Exceptions
    "AccountAlreadyExistsException",
    "AuthenticationException",
    "AuthorizationException",
    "ConfigurationException",
    "DuplicateAssignmentException",
    "ParishException",
    "ProvisioningFailedException",
    "ResourceNotFoundException",
    "RoleAlreadyExistsException",
    "SystemRoleImmutableException",
    "ValidationException",
    # Value objects
    "EffectiveAccess",
    "PermissionCode",
    "RoleCode",
    "Scoped",
    "Unrestricted",
]
