"""Deactivate expired role assignments and permission overrides.

Usage:
    uv run python -m scripts.cleanup_expired_assignments
Intended for a scheduler (cron, Kubernetes CronJob). Resolution already
ignores expired rows; this keeps the stored status in line. All imports use app.*.
"""

import asyncio

from app.application.services import AssignmentService
from app.core.config import get_settings
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import (
    AccountRepository,
    PermissionRepository,
    RoleRepository,
    UserPermissionRepository,
    UserRoleRepository,
)
from app.shared.telemetry.logging import setup_logging


async def main() -> None:
    get_settings()
    setup_logging()
    try:
        async with get_session_factory()() as session:
            async with session.begin():
                service = AssignmentService(
                    account_repo=AccountRepository(session),
                    role_repo=RoleRepository(session),
                    permission_repo=PermissionRepository(session),
                    user_role_repo=UserRoleRepository(session),
                    user_permission_repo=UserPermissionRepository(session),
                )
                result = await service.deactivate_expired()
        print(
            f"Deactivated {result.user_roles} role assignments and "
            f"{result.user_permissions} permission overrides"
        )
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
