"""Account provisioning: account + default role edge + domain profile, as a saga.

Every step runs in its own unit of work, so the steps are independent
writes. A failure after the account exists is undone by the saga's
compensations (delete role edge, delete account). A process crash between
two steps is not recovered; see DESIGN.md.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import replace
from functools import partial

from app.application.dtos.account import AccountCreate, AccountResult
from app.application.dtos.mappers import (
    account_to_result,
    church_admin_to_result,
    parishioner_to_result,
)
from app.application.dtos.parish import (
    ChurchAdminProfile,
    ChurchAdminResult,
    ParishionerProfile,
    ParishionerResult,
)
from app.application.dtos.provisioning import ProvisionResult
from app.application.dtos.role import RoleResult
from app.application.interfaces.repositories import (
    IRoleRepository,
    IUnitOfWork,
)
from app.application.interfaces.services import INotificationSink
from app.application.services.provisioning_saga import ProvisioningSaga
from app.domain.enums import AccountKind, RecordStatus, SagaState
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    ConfigurationException,
    ParishException,
    ProvisioningFailedException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.roles import default_role_for_kind
from app.shared.context import get_current_actor_id
from app.shared.utils.generators import generate_temporary_password

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], IUnitOfWork]
PasswordHasher = Callable[[str], str]


def log_detached_outcome(subject: str, task: asyncio.Task) -> None:
    """Done-callback for a shielded run whose caller was cancelled.

    Retrieves the task result so a late failure is logged instead of lost.
    """
    if task.cancelled():
        logger.error("Provisioning of %s was cancelled before it finished", subject)
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            "Provisioning of %s failed after the caller was cancelled: %s",
            subject,
            exc,
            exc_info=exc,
        )
    else:
        logger.info("Provisioning of %s completed after the caller was cancelled", subject)


async def require_default_role(
    roles: IRoleRepository, kind: AccountKind | str, subject: str
) -> RoleResult:
    """Return the active global default role for kind.

    A missing or inactive default role is a deployment bug, not a caller
    error: logged at ERROR with full context and raised as ConfigurationException.
    """
    role_code = default_role_for_kind(kind)
    role = await roles.get_by_code(role_code)
    if role is None or not role.is_active:
        logger.error(
            "Default role %s for account kind %s is %s; refusing to provision %s. "
            "Run the RBAC seed script.",
            role_code,
            getattr(kind, "value", kind),
            "missing" if role is None else "inactive",
            subject,
        )
        raise ConfigurationException(
            "Default role is not configured",
            {"role_code": role_code, "account_kind": getattr(kind, "value", kind)},
        )
    logger.info("Default role %s verified for %s", role_code, subject)
    return role


async def validate_profile_parents(
    uow: IUnitOfWork,
    parish_id: str | None,
    ward_id: str | None = None,
    family_id: str | None = None,
) -> None:
    """Parish must exist and be active; ward and family must belong to it.

    Raises:
        ValidationException: Missing parish or a parent outside the parish.
    """
    if not parish_id:
        raise ValidationException("parish_id is required", field="parish_id")
    if await uow.parishes.get_active(parish_id) is None:
        raise ValidationException("Parish not found or inactive", field="parish_id")
    ward = None
    if ward_id:
        ward = await uow.wards.get_in_parish(ward_id, parish_id)
        if ward is None:
            raise ValidationException("Ward does not belong to this parish", field="ward_id")
    if family_id:
        family = await uow.families.get_in_parish(family_id, parish_id)
        if family is None:
            raise ValidationException(
                "Family does not belong to this parish", field="family_id"
            )
        if ward is not None and family.ward_id and family.ward_id != ward.id:
            raise ValidationException(
                "Family belongs to a different ward", field="family_id"
            )


class ProvisioningService:
    """Runs the provisioning saga for parishioners and church administrators."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        hash_password: PasswordHasher,
        notification_sink: INotificationSink | None = None,
        *,
        password_length: int = 16,
    ) -> None:
        self._uow_factory = uow_factory
        self._hash_password = hash_password
        self._notifications = notification_sink
        self._password_length = password_length

    async def provision_account_with_profile(
        self,
        kind: AccountKind | str,
        account: AccountCreate,
        profile: ParishionerProfile | ChurchAdminProfile,
        *,
        is_tenant_admin: bool = False,
    ) -> ProvisionResult:
        """Create account, bind the kind's default role, create the profile.

        Returns only on full success. Once the account exists the run is
        shielded from task cancellation so it always ends committed or
        compensated.

        Raises:
            ConfigurationException: Default role missing (nothing created).
            AccountAlreadyExistsException: E-mail taken (pre-check or unique key).
            ValidationException: Bad parent references or profile/kind mismatch.
            ProvisioningFailedException: A storage step failed and was compensated.
        """
        kind = AccountKind(kind)
        if kind is AccountKind.SUPER_ADMIN:
            raise ValidationException(
                "Super administrator accounts are created by the bootstrap script",
                field="kind",
            )
        expected = ParishionerProfile if kind is AccountKind.PARISHIONER else ChurchAdminProfile
        if not isinstance(profile, expected):
            raise ValidationException(
                f"Profile does not match account kind '{kind.value}'", field="profile"
            )
        saga = ProvisioningSaga(subject=account.email, kind=kind.value)
        task = asyncio.ensure_future(
            self._run(saga, kind, account, profile, is_tenant_admin)
        )
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            task.add_done_callback(partial(log_detached_outcome, saga.subject))
            raise

    async def _run(
        self,
        saga: ProvisioningSaga,
        kind: AccountKind,
        data: AccountCreate,
        profile: ParishionerProfile | ChurchAdminProfile,
        is_tenant_admin: bool,
    ) -> ProvisionResult:
        temporary_password = None
        password = data.password
        if not password:
            password = generate_temporary_password(self._password_length)
            temporary_password = password
        ward_id = getattr(profile, "ward_id", None)
        family_id = getattr(profile, "family_id", None)

        async def verify() -> RoleResult:
            async with self._uow_factory() as uow:
                role = await require_default_role(uow.roles, kind, data.email)
                if await uow.accounts.email_exists(data.email):
                    raise AccountAlreadyExistsException(data.email)
                await validate_profile_parents(uow, data.parish_id, ward_id, family_id)
                return role

        role = await saga.run_step("verify_role", SagaState.ROLE_VERIFIED, verify)

        async def create_account() -> AccountResult:
            hashed = await asyncio.to_thread(self._hash_password, password)
            async with self._uow_factory() as uow:
                row = await uow.accounts.create_account(
                    email=data.email,
                    hashed_password=hashed,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    kind=kind.value,
                    phone=data.phone,
                    parish_id=data.parish_id,
                    is_tenant_admin=is_tenant_admin,
                )
                return account_to_result(row)

        try:
            account = await saga.run_step(
                "create_account",
                SagaState.ACCOUNT_CREATED,
                create_account,
                lambda acc: self._delete_account(acc.id),
            )
        except ParishException:
            raise
        except Exception as exc:
            logger.error("Account creation failed for %s", data.email, exc_info=True)
            raise ProvisioningFailedException() from exc

        async def bind_role() -> None:
            async with self._uow_factory() as uow:
                await uow.user_roles.add(
                    account.id, role.id, assigned_by=get_current_actor_id()
                )

        try:
            await saga.run_step(
                "bind_role",
                SagaState.ROLE_BOUND,
                bind_role,
                lambda _: self._delete_role_edge(account.id, role.id),
            )
        except Exception as exc:
            logger.error(
                "Role binding failed for %s (role=%s); account removed",
                account.email,
                role.code,
                exc_info=True,
            )
            raise ProvisioningFailedException() from exc

        async def create_profile() -> ParishionerResult | ChurchAdminResult:
            async with self._uow_factory() as uow:
                if isinstance(profile, ParishionerProfile):
                    row = await uow.parishioners.create_profile(
                        account.id, data.parish_id, profile
                    )
                    if profile.ward_id:
                        await uow.wards.recalculate_counts(profile.ward_id)
                    return parishioner_to_result(row)
                row = await uow.church_admins.create_profile(
                    account.id, data.parish_id, profile
                )
                return church_admin_to_result(row)

        try:
            created_profile = await saga.run_step(
                "create_profile", SagaState.PROFILE_CREATED, create_profile
            )
        except ParishException:
            raise
        except Exception as exc:
            logger.error(
                "Profile creation failed for %s; role edge and account removed",
                account.email,
                exc_info=True,
            )
            raise ProvisioningFailedException() from exc

        saga.commit()
        logger.info(
            "Account provisioned: %s (kind=%s, role=%s)",
            account.email,
            kind.value,
            role.code,
        )
        await self._notify(account, temporary_password)
        return ProvisionResult(
            account=account,
            profile=created_profile,
            role_code=role.code,
            temporary_password=temporary_password,
        )

    def _delete_account(self, account_id: str):
        async def undo() -> None:
            async with self._uow_factory() as uow:
                await uow.user_permissions.remove_all_for_user(account_id)
                await uow.user_roles.remove_all_for_user(account_id)
                await uow.accounts.delete_by_id(account_id)

        return undo

    def _delete_role_edge(self, account_id: str, role_id: str):
        async def undo() -> None:
            async with self._uow_factory() as uow:
                await uow.user_roles.remove(account_id, role_id)

        return undo

    async def _notify(self, account: AccountResult, temporary_password: str | None) -> None:
        if self._notifications is None:
            return
        try:
            await self._notifications.send_welcome(account, temporary_password)
        except Exception as exc:
            logger.warning("Welcome notification failed for %s: %s", account.email, exc)

    async def register_parishioner(
        self, account: AccountCreate, profile: ParishionerProfile | None = None
    ) -> ProvisionResult:
        """Public self-registration; a password is required."""
        if not account.password:
            raise ValidationException("Password is required", field="password")
        return await self.provision_account_with_profile(
            AccountKind.PARISHIONER, account, profile or ParishionerProfile()
        )

    async def create_parishioner(
        self,
        account: AccountCreate,
        profile: ParishionerProfile,
        tenant_id: str | None = None,
    ) -> ProvisionResult:
        """Staff-created parishioner. A tenant caller can only create in its own parish."""
        if tenant_id is not None:
            if account.parish_id not in (None, tenant_id):
                raise ResourceNotFoundException("parish", account.parish_id)
            account = replace(account, parish_id=tenant_id)
        return await self.provision_account_with_profile(
            AccountKind.PARISHIONER, account, profile
        )

    async def create_parish_admin(
        self,
        account: AccountCreate,
        profile: ChurchAdminProfile,
        *,
        is_tenant_admin: bool = True,
    ) -> ProvisionResult:
        return await self.provision_account_with_profile(
            AccountKind.CHURCH_ADMIN, account, profile, is_tenant_admin=is_tenant_admin
        )

    async def remove_parishioner(self, parishioner_id: str, parish_id: str) -> None:
        """Deactivate the profile and its account, then recompute ward counters."""
        async with self._uow_factory() as uow:
            parishioner = await uow.parishioners.get_in_parish(parishioner_id, parish_id)
            if parishioner is None or parishioner.status != RecordStatus.ACTIVE.value:
                raise ResourceNotFoundException("parishioner", parishioner_id)
            await uow.parishioners.deactivate(parishioner)
            account = await uow.accounts.get_by_id(parishioner.account_id)
            if account is not None:
                await uow.accounts.deactivate(account)
            if parishioner.ward_id:
                await uow.wards.recalculate_counts(parishioner.ward_id)
        logger.info("Parishioner %s removed from parish %s", parishioner_id, parish_id)
