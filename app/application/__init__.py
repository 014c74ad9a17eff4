"""Application layer: interfaces, DTOs and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, resolver, notification sink).
"""

from app.application.interfaces import IPermissionResolver, IUnitOfWork
from app.application.services.authorization_service import AuthorizationService
from app.application.services.provisioning_service import ProvisioningService

__all__ = [
    "AuthorizationService",
    "IPermissionResolver",
    "IUnitOfWork",
    "ProvisioningService",
]
