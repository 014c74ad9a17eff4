"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import (
    IAccountRepository,
    IChurchAdminRepository,
    IFamilyRepository,
    IParishRepository,
    IParishionerRepository,
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUnitOfWork,
    IUserPermissionRepository,
    IUserRoleRepository,
    IWardRepository,
)
from app.application.interfaces.services import INotificationSink, IPermissionResolver

__all__ = [
    "IAccountRepository",
    "IChurchAdminRepository",
    "IFamilyRepository",
    "INotificationSink",
    "IParishRepository",
    "IParishionerRepository",
    "IPermissionRepository",
    "IPermissionResolver",
    "IRolePermissionRepository",
    "IRoleRepository",
    "IUnitOfWork",
    "IUserPermissionRepository",
    "IUserRoleRepository",
    "IWardRepository",
]
