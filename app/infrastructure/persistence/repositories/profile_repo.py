"""Parishioner and ChurchAdmin profile repositories."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.parish import ChurchAdminProfile, ParishionerProfile
from app.domain.enums import RecordStatus
from app.infrastructure.persistence.models.profile import ChurchAdmin, Parishioner
from app.infrastructure.persistence.repositories.base import BaseRepository


class ParishionerRepository(BaseRepository[Parishioner]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Parishioner)

    async def create_profile(
        self, account_id: str, parish_id: str, profile: ParishionerProfile
    ) -> Parishioner:
        return await self.create(
            Parishioner(
                account_id=account_id,
                parish_id=parish_id,
                ward_id=profile.ward_id,
                family_id=profile.family_id,
                middle_name=profile.middle_name,
                date_of_birth=profile.date_of_birth,
                gender=profile.gender,
                occupation=profile.occupation,
                member_status=profile.member_status,
                address_line1=profile.address_line1,
                address_line2=profile.address_line2,
                city=profile.city,
                postal_code=profile.postal_code,
                status=RecordStatus.ACTIVE.value,
            )
        )

    async def get_in_parish(self, parishioner_id: str, parish_id: str) -> Parishioner | None:
        result = await self.db.execute(
            select(Parishioner).where(
                Parishioner.id == parishioner_id, Parishioner.parish_id == parish_id
            )
        )
        return result.scalar_one_or_none()

    async def get_by_account(self, account_id: str) -> Parishioner | None:
        result = await self.db.execute(
            select(Parishioner).where(Parishioner.account_id == account_id)
        )
        return result.scalar_one_or_none()

    async def delete_for_account(self, account_id: str) -> bool:
        result = await self.db.execute(
            delete(Parishioner).where(Parishioner.account_id == account_id)
        )
        await self.db.flush()
        return (result.rowcount or 0) > 0

    async def deactivate(self, parishioner: Parishioner) -> Parishioner:
        parishioner.status = RecordStatus.INACTIVE.value
        return await self.update(parishioner)


class ChurchAdminRepository(BaseRepository[ChurchAdmin]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ChurchAdmin)

    async def create_profile(
        self, account_id: str, parish_id: str, profile: ChurchAdminProfile
    ) -> ChurchAdmin:
        return await self.create(
            ChurchAdmin(
                account_id=account_id,
                parish_id=parish_id,
                role_title=profile.role_title,
                department=profile.department,
                is_primary_admin=profile.is_primary_admin,
                status=RecordStatus.ACTIVE.value,
            )
        )

    async def get_by_account(self, account_id: str) -> ChurchAdmin | None:
        result = await self.db.execute(
            select(ChurchAdmin).where(ChurchAdmin.account_id == account_id)
        )
        return result.scalar_one_or_none()
