"""Parish onboarding: parish row plus its primary administrator account."""

from __future__ import annotations

import logging
from dataclasses import replace

from app.application.dtos.account import AccountCreate
from app.application.dtos.mappers import parish_to_result
from app.application.dtos.parish import ChurchAdminProfile, ParishCreate, ParishResult
from app.application.dtos.provisioning import ParishWithAdminResult
from app.application.services.provisioning_service import (
    ProvisioningService,
    UnitOfWorkFactory,
    require_default_role,
)
from app.domain.enums import AccountKind
from app.domain.exceptions import AccountAlreadyExistsException, AuthorizationException

logger = logging.getLogger(__name__)


class ParishService:
    """Creates a parish and runs the admin provisioning saga for it.

    The parish is the parent of the saga: if the admin saga fails (after its
    own compensation) the parish row is deleted as well. Parishes are created
    by platform administrators only; a parish-scoped caller is refused.
    """

    def __init__(
        self, uow_factory: UnitOfWorkFactory, provisioning: ProvisioningService
    ) -> None:
        self._uow_factory = uow_factory
        self._provisioning = provisioning

    async def create_parish_with_admin(
        self,
        parish: ParishCreate,
        admin: AccountCreate,
        admin_profile: ChurchAdminProfile | None = None,
        *,
        tenant_id: str | None = None,
    ) -> ParishWithAdminResult:
        if tenant_id is not None:
            raise AuthorizationException(
                message="Parishes can only be created by a platform administrator"
            )
        async with self._uow_factory() as uow:
            await require_default_role(uow.roles, AccountKind.CHURCH_ADMIN, admin.email)
            if await uow.accounts.email_exists(admin.email):
                raise AccountAlreadyExistsException(admin.email)

        created = await self._create_parish(parish)
        profile = replace(admin_profile or ChurchAdminProfile(), is_primary_admin=True)
        try:
            result = await self._provisioning.create_parish_admin(
                replace(admin, parish_id=created.id), profile
            )
        except BaseException:
            await self._delete_parish(created.id)
            raise
        logger.info("Parish created: %s (%s) with admin %s", created.name, created.id, admin.email)
        return ParishWithAdminResult(parish=created, admin=result)

    async def _create_parish(self, parish: ParishCreate) -> ParishResult:
        async with self._uow_factory() as uow:
            row = await uow.parishes.create_parish(parish)
            return parish_to_result(row)

    async def _delete_parish(self, parish_id: str) -> None:
        try:
            async with self._uow_factory() as uow:
                await uow.parishes.delete_by_id(parish_id)
        except Exception:
            logger.critical(
                "Failed to delete parish %s after admin provisioning failed. "
                "Orphaned parish requires manual remediation.",
                parish_id,
                exc_info=True,
            )
        else:
            logger.warning("Parish %s removed after admin provisioning failed", parish_id)
