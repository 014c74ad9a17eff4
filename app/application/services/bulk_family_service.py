"""Bulk family provisioning: a ward, a family and its members in one go.

TRANSACTIONAL mode (interactive bulk create) runs everything in one unit of
work: any failure rolls back the ward, the family and every member.
BATCH mode (CSV import) validates member rows first, records per-row
errors and provisions the remaining members; a storage failure aborts only
the current family's unit of work.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import date
from typing import Any

from email_validator import EmailNotValidError, validate_email

from app.application.dtos.mappers import (
    account_to_result,
    family_to_result,
    parishioner_to_result,
    ward_to_result,
)
from app.application.dtos.parish import ParishionerProfile
from app.application.dtos.provisioning import (
    BulkFamilyResult,
    BulkImportResult,
    CreatedMember,
    FamilySpec,
    ImportRow,
    MemberSpec,
    RowError,
    WardSpec,
)
from app.application.dtos.role import RoleResult
from app.application.interfaces.repositories import IUnitOfWork
from app.application.interfaces.services import INotificationSink
from app.application.services.provisioning_service import (
    PasswordHasher,
    UnitOfWorkFactory,
    require_default_role,
)
from app.domain.enums import AccountKind, BulkMode
from app.domain.exceptions import (
    ParishException,
    ProvisioningFailedException,
    ValidationException,
)
from app.shared.context import get_current_actor_id
from app.shared.utils.generators import generate_temporary_password

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "y"}


def normalized_email(raw: str | None) -> str:
    """Validated, lower-cased address (same rules as the API's EmailStr fields).

    Raises:
        EmailNotValidError: Malformed address.
    """
    result = validate_email((raw or "").strip(), check_deliverability=False)
    return result.normalized.lower()


def _member_error(member: MemberSpec, email_in_batch: set[str], existing: set[str]) -> str | None:
    """Return why a member row cannot be provisioned, or None."""
    if not (member.first_name or "").strip():
        return "first_name is required"
    if not (member.last_name or "").strip():
        return "last_name is required"
    if not (member.email or "").strip():
        return "email is required"
    try:
        email = normalized_email(member.email)
    except EmailNotValidError:
        return f"Invalid email: {member.email}"
    if email in existing:
        return f"An account with email {email} already exists"
    if email in email_in_batch:
        return f"Duplicate email in batch: {email}"
    if member.password is not None and len(member.password) < 8:
        return "password must be at least 8 characters"
    return None


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUE_VALUES


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def row_to_member(row: ImportRow, row_number: int) -> MemberSpec:
    """Build a MemberSpec from an import row. Raises ValueError on a malformed date."""
    dob = _clean(row.get("date_of_birth"))
    return MemberSpec(
        first_name=_clean(row.get("first_name")),
        last_name=_clean(row.get("last_name")),
        email=_clean(row.get("email")),
        password=_clean(row.get("password")),
        phone=_clean(row.get("phone")),
        middle_name=_clean(row.get("middle_name")),
        date_of_birth=date.fromisoformat(dob) if dob else None,
        gender=_clean(row.get("gender")),
        occupation=_clean(row.get("occupation")),
        member_status=_clean(row.get("member_status")) or "active",
        address_line1=_clean(row.get("address_line1")),
        address_line2=_clean(row.get("address_line2")),
        city=_clean(row.get("city")),
        postal_code=_clean(row.get("postal_code")),
        is_primary_contact=_truthy(row.get("is_primary_contact")),
        row=row_number,
    )


class BulkFamilyService:
    """Provision families with their members (interactive and CSV-import paths)."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        hash_password: PasswordHasher,
        notification_sink: INotificationSink | None = None,
        *,
        max_members: int = 50,
        max_import_rows: int = 1000,
        password_length: int = 16,
    ) -> None:
        self._uow_factory = uow_factory
        self._hash_password = hash_password
        self._notifications = notification_sink
        self._max_members = max_members
        self._max_import_rows = max_import_rows
        self._password_length = password_length

    async def provision_family(
        self,
        parish_id: str,
        ward: WardSpec | None,
        family: FamilySpec,
        members: list[MemberSpec],
        mode: BulkMode | str = BulkMode.TRANSACTIONAL,
    ) -> BulkFamilyResult:
        """Create or reuse ward and family, then provision members into it.

        Raises:
            ConfigurationException: FAMILY_MEMBER default role missing (nothing created).
            ValidationException: Bad request shape; in TRANSACTIONAL mode also any invalid member.
            AccountAlreadyExistsException: TRANSACTIONAL mode, e-mail taken.
            ProvisioningFailedException: TRANSACTIONAL mode, storage failure (rolled back).
        """
        mode = BulkMode(mode)
        if not members:
            raise ValidationException("At least one member is required", field="members")
        if len(members) > self._max_members:
            raise ValidationException(
                f"At most {self._max_members} members per family", field="members"
            )
        if not family.family_id and not (family.family_name or "").strip():
            raise ValidationException(
                "Either family_id (existing) or family_name (new) is required",
                field="family",
            )
        async with self._uow_factory() as uow:
            role = await require_default_role(
                uow.roles, AccountKind.PARISHIONER, f"family {family.family_name or family.family_id}"
            )
            if await uow.parishes.get_active(parish_id) is None:
                raise ValidationException("Parish not found or inactive", field="parish_id")
            existing = await uow.accounts.existing_emails([m.email or "" for m in members])

        valid, errors = self._partition_members(members, existing, family)
        if mode is BulkMode.TRANSACTIONAL and errors:
            raise ValidationException(
                f"Member validation failed: {errors[0].error}", field="members"
            )
        if not valid:
            return BulkFamilyResult(family=None, ward=None, errors=errors)

        try:
            result = await self._provision(parish_id, ward, family, valid, role)
        except ParishException as exc:
            if mode is BulkMode.TRANSACTIONAL:
                raise
            return BulkFamilyResult(
                family=None,
                ward=None,
                errors=[*errors, RowError(row=None, family=family.family_name, error=exc.message)],
            )
        except Exception as exc:
            logger.error(
                "Bulk family provisioning failed for %s; rolled back",
                family.family_name or family.family_id,
                exc_info=True,
            )
            if mode is BulkMode.TRANSACTIONAL:
                raise ProvisioningFailedException() from exc
            return BulkFamilyResult(
                family=None,
                ward=None,
                errors=[
                    *errors,
                    RowError(
                        row=None,
                        family=family.family_name,
                        error="Failed to create family members",
                    ),
                ],
            )

        await self._notify(result.created_members)
        return BulkFamilyResult(
            family=result.family,
            ward=result.ward,
            created_members=result.created_members,
            errors=errors,
        )

    def _partition_members(
        self, members: list[MemberSpec], existing: set[str], family: FamilySpec
    ) -> tuple[list[MemberSpec], list[RowError]]:
        seen: set[str] = set()
        valid: list[MemberSpec] = []
        errors: list[RowError] = []
        for member in members:
            reason = _member_error(member, seen, existing)
            if reason is not None:
                errors.append(
                    RowError(
                        row=member.row,
                        family=family.family_name,
                        error=reason,
                        email=member.email,
                    )
                )
                continue
            email = normalized_email(member.email)
            seen.add(email)
            valid.append(replace(member, email=email))
        return valid, errors

    async def _provision(
        self,
        parish_id: str,
        ward_spec: WardSpec | None,
        family_spec: FamilySpec,
        members: list[MemberSpec],
        role: RoleResult,
    ) -> BulkFamilyResult:
        prepared = []
        for member in members:
            password = member.password or generate_temporary_password(self._password_length)
            hashed = await asyncio.to_thread(self._hash_password, password)
            prepared.append((member, hashed, None if member.password else password))

        actor_id = get_current_actor_id()
        async with self._uow_factory() as uow:
            ward = await self._resolve_ward(uow, parish_id, ward_spec)
            family, family_created, previous_ward_id = await self._resolve_family(
                uow, parish_id, family_spec, ward
            )
            created: list[CreatedMember] = []
            primary_contact_id: str | None = None
            for member, hashed, temporary_password in prepared:
                account = await uow.accounts.create_account(
                    email=member.email or "",
                    hashed_password=hashed,
                    first_name=(member.first_name or "").strip(),
                    last_name=(member.last_name or "").strip(),
                    kind=AccountKind.PARISHIONER.value,
                    phone=member.phone,
                    parish_id=parish_id,
                )
                await uow.user_roles.add(account.id, role.id, assigned_by=actor_id)
                profile = await uow.parishioners.create_profile(
                    account.id,
                    parish_id,
                    ParishionerProfile(
                        ward_id=family.ward_id,
                        family_id=family.id,
                        middle_name=member.middle_name,
                        date_of_birth=member.date_of_birth,
                        gender=member.gender,
                        occupation=member.occupation,
                        member_status=member.member_status,
                        address_line1=member.address_line1,
                        address_line2=member.address_line2,
                        city=member.city,
                        postal_code=member.postal_code,
                    ),
                )
                if member.is_primary_contact or (family_created and primary_contact_id is None):
                    primary_contact_id = account.id
                created.append(
                    CreatedMember(
                        account=account_to_result(account),
                        parishioner=parishioner_to_result(profile),
                        temporary_password=temporary_password,
                    )
                )

            if primary_contact_id and (family_created or family_spec.update_primary_contact):
                family.primary_contact_id = primary_contact_id
                family = await uow.families.update(family)

            for ward_id in {family.ward_id, previous_ward_id} - {None}:
                refreshed = await uow.wards.recalculate_counts(ward_id)
                if ward is not None and refreshed is not None and refreshed.id == ward.id:
                    ward = refreshed

            logger.info(
                "Family %s provisioned with %d members (created=%s)",
                family.family_name,
                len(created),
                family_created,
            )
            return BulkFamilyResult(
                family=family_to_result(family),
                ward=ward_to_result(ward) if ward is not None else None,
                created_members=created,
            )

    @staticmethod
    async def _resolve_ward(uow: IUnitOfWork, parish_id: str, ward_spec: WardSpec | None):
        """Existing ward by id, or found/created by number, or by name. None when no ward is given."""
        if ward_spec is None or not (ward_spec.ward_id or ward_spec.ward_number or ward_spec.name):
            return None
        if ward_spec.ward_id:
            ward = await uow.wards.get_in_parish(ward_spec.ward_id, parish_id)
            if ward is None:
                raise ValidationException("Ward does not belong to this parish", field="ward_id")
            return ward
        if ward_spec.ward_number:
            ward = await uow.wards.get_by_number(parish_id, ward_spec.ward_number)
            if ward is None:
                ward = await uow.wards.create_ward(
                    parish_id, ward_spec.name or f"Ward {ward_spec.ward_number}", ward_spec.ward_number
                )
            return ward
        ward = await uow.wards.get_by_name(parish_id, ward_spec.name or "")
        if ward is None:
            ward = await uow.wards.create_ward(parish_id, ward_spec.name or "")
        return ward

    @staticmethod
    async def _resolve_family(uow: IUnitOfWork, parish_id: str, family_spec: FamilySpec, ward):
        """Return (family row, created flag, ward id the family moved away from)."""
        family = None
        if family_spec.family_id:
            family = await uow.families.get_in_parish(family_spec.family_id, parish_id)
            if family is None:
                raise ValidationException(
                    "Family does not belong to this parish", field="family_id"
                )
        elif family_spec.family_name:
            family = await uow.families.get_by_name(parish_id, family_spec.family_name)

        if family is None:
            created = await uow.families.create_family(
                parish_id,
                family_spec.family_name or "",
                ward_id=ward.id if ward is not None else None,
                home_phone=family_spec.home_phone,
            )
            return created, True, None

        previous_ward_id = None
        if ward is not None and family.ward_id != ward.id:
            if family.ward_id is None or family_spec.update_ward:
                previous_ward_id = family.ward_id
                family.ward_id = ward.id
                family = await uow.families.update(family)
            else:
                raise ValidationException(
                    "Family belongs to a different ward; set update_ward to move it",
                    field="ward",
                )
        return family, False, previous_ward_id

    async def import_rows(self, parish_id: str, rows: list[ImportRow]) -> BulkImportResult:
        """Provision families from CSV-shaped rows (header is row 1, data starts at 2)."""
        if not rows:
            raise ValidationException("No rows to import", field="rows")
        if len(rows) > self._max_import_rows:
            raise ValidationException(
                f"At most {self._max_import_rows} rows per import", field="rows"
            )
        async with self._uow_factory() as uow:
            await require_default_role(uow.roles, AccountKind.PARISHIONER, f"import into {parish_id}")

        errors: list[RowError] = []
        groups: dict[str, list[tuple[int, ImportRow]]] = {}
        for index, row in enumerate(rows):
            row_number = index + 2
            name = _clean(row.get("family_name"))
            if not name:
                errors.append(
                    RowError(row=row_number, family=None, error="family_name is required",
                             email=_clean(row.get("email")))
                )
                continue
            groups.setdefault(name.lower(), []).append((row_number, row))

        families: list[BulkFamilyResult] = []
        for grouped in groups.values():
            first = grouped[0][1]
            family_name = _clean(first.get("family_name")) or ""
            members: list[MemberSpec] = []
            for row_number, row in grouped:
                try:
                    members.append(row_to_member(row, row_number))
                except ValueError:
                    errors.append(
                        RowError(
                            row=row_number,
                            family=family_name,
                            error=f"Invalid date_of_birth: {row.get('date_of_birth')}",
                            email=_clean(row.get("email")),
                        )
                    )
            if not members:
                continue
            ward_number = next(
                (_clean(r.get("ward_number")) for _, r in grouped if _clean(r.get("ward_number"))),
                None,
            )
            ward_name = next(
                (_clean(r.get("ward_name")) for _, r in grouped if _clean(r.get("ward_name"))),
                None,
            )
            ward = WardSpec(ward_number=ward_number, name=ward_name) if (ward_number or ward_name) else None
            try:
                result = await self.provision_family(
                    parish_id,
                    ward,
                    FamilySpec(family_name=family_name, home_phone=_clean(first.get("home_phone"))),
                    members,
                    BulkMode.BATCH,
                )
            except ValidationException as exc:
                result = BulkFamilyResult(
                    family=None,
                    ward=None,
                    errors=[RowError(row=grouped[0][0], family=family_name, error=exc.message)],
                )
            families.append(result)

        summary = BulkImportResult(families=families, errors=errors)
        logger.info(
            "Import into parish %s: %d families, %d members, %d errors",
            parish_id,
            summary.total_families,
            summary.total_members,
            summary.total_errors,
        )
        return summary

    async def _notify(self, members: list[CreatedMember]) -> None:
        if self._notifications is None:
            return
        for member in members:
            try:
                await self._notifications.send_welcome(member.account, member.temporary_password)
            except Exception as exc:
                logger.warning(
                    "Welcome notification failed for %s: %s", member.account.email, exc
                )


__all__ = ["BulkFamilyService", "row_to_member"]
