"""Ward repository. Ward counters are derived values, recomputed from child rows."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import RecordStatus
from app.infrastructure.persistence.models.parish import Family, Ward
from app.infrastructure.persistence.models.profile import Parishioner
from app.infrastructure.persistence.repositories.base import BaseRepository


class WardRepository(BaseRepository[Ward]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Ward)

    async def get_in_parish(self, ward_id: str, parish_id: str) -> Ward | None:
        result = await self.db.execute(
            select(Ward).where(Ward.id == ward_id, Ward.parish_id == parish_id)
        )
        return result.scalar_one_or_none()

    async def get_by_number(self, parish_id: str, ward_number: str) -> Ward | None:
        result = await self.db.execute(
            select(Ward).where(
                Ward.parish_id == parish_id, Ward.ward_number == ward_number
            )
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, parish_id: str, name: str) -> Ward | None:
        result = await self.db.execute(
            select(Ward)
            .where(Ward.parish_id == parish_id, func.lower(Ward.name) == name.lower())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_ward(
        self, parish_id: str, name: str, ward_number: str | None = None
    ) -> Ward:
        return await self.create(
            Ward(
                parish_id=parish_id,
                name=name,
                ward_number=ward_number,
                total_families=0,
                total_members=0,
                status=RecordStatus.ACTIVE.value,
            )
        )

    async def recalculate_counts(self, ward_id: str) -> Ward | None:
        """Recompute total_families and total_members from active child rows."""
        ward = await self.get_by_id(ward_id)
        if ward is None:
            return None
        families = await self.db.execute(
            select(func.count())
            .select_from(Family)
            .where(
                Family.ward_id == ward_id,
                Family.status == RecordStatus.ACTIVE.value,
            )
        )
        members = await self.db.execute(
            select(func.count())
            .select_from(Parishioner)
            .where(
                Parishioner.ward_id == ward_id,
                Parishioner.status == RecordStatus.ACTIVE.value,
            )
        )
        ward.total_families = families.scalar() or 0
        ward.total_members = members.scalar() or 0
        return await self.update(ward)
