"""SQLAlchemy unit of work: one session and one transaction per ``async with`` block.

Used where the application layer needs explicit transaction boundaries (each
provisioning saga step, each bulk family). Commits when the block exits
normally, rolls back when it raises, always closes the session.
"""

import logging
from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.infrastructure.persistence.repositories import (
    AccountRepository,
    ChurchAdminRepository,
    FamilyRepository,
    ParishRepository,
    ParishionerRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserPermissionRepository,
    UserRoleRepository,
    WardRepository,
)

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """Implements IUnitOfWork. Repositories are bound to the block's session."""

    session: AsyncSession

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self._session_factory()
        self.accounts = AccountRepository(self.session)
        self.roles = RoleRepository(self.session)
        self.permissions = PermissionRepository(self.session)
        self.role_permissions = RolePermissionRepository(self.session)
        self.user_roles = UserRoleRepository(self.session)
        self.user_permissions = UserPermissionRepository(self.session)
        self.parishes = ParishRepository(self.session)
        self.wards = WardRepository(self.session)
        self.families = FamilyRepository(self.session)
        self.parishioners = ParishionerRepository(self.session)
        self.church_admins = ChurchAdminRepository(self.session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is None:
                await self.session.commit()
            else:
                await self.session.rollback()
                logger.debug("Unit of work rolled back: %s", exc_type.__name__)
        finally:
            await self.session.close()


def unit_of_work_factory(
    session_factory: async_sessionmaker[AsyncSession],
):
    """Return a zero-argument callable producing fresh units of work."""

    def _factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory)

    return _factory
