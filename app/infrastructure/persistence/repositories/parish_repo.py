"""Parish repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.parish import ParishCreate
from app.domain.enums import RecordStatus
from app.infrastructure.persistence.models.parish import Parish
from app.infrastructure.persistence.repositories.base import BaseRepository


class ParishRepository(BaseRepository[Parish]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Parish)

    async def create_parish(self, data: ParishCreate) -> Parish:
        return await self.create(
            Parish(
                name=data.name,
                diocese=data.diocese,
                city=data.city,
                country=data.country,
                email=data.email,
                phone=data.phone,
                timezone=data.timezone,
                status=RecordStatus.ACTIVE.value,
            )
        )

    async def get_active(self, parish_id: str) -> Parish | None:
        parish = await self.get_by_id(parish_id)
        if parish is None or parish.status != RecordStatus.ACTIVE.value:
            return None
        return parish
