"""Family repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import RecordStatus
from app.infrastructure.persistence.models.parish import Family
from app.infrastructure.persistence.repositories.base import BaseRepository


class FamilyRepository(BaseRepository[Family]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Family)

    async def get_in_parish(self, family_id: str, parish_id: str) -> Family | None:
        result = await self.db.execute(
            select(Family).where(Family.id == family_id, Family.parish_id == parish_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, parish_id: str, family_name: str) -> Family | None:
        """Case-insensitive lookup of an active family by name within a parish."""
        result = await self.db.execute(
            select(Family)
            .where(
                Family.parish_id == parish_id,
                func.lower(Family.family_name) == family_name.strip().lower(),
                Family.status == RecordStatus.ACTIVE.value,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_family(
        self,
        parish_id: str,
        family_name: str,
        *,
        ward_id: str | None = None,
        home_phone: str | None = None,
    ) -> Family:
        return await self.create(
            Family(
                parish_id=parish_id,
                ward_id=ward_id,
                family_name=family_name.strip(),
                home_phone=home_phone,
                status=RecordStatus.ACTIVE.value,
            )
        )
