"""Base repository: generic CRUD shared by every persistence repository."""

from typing import Any

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

# SQLSTATE for unique_violation (PostgreSQL).
_UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when exc is a unique-key violation (not a foreign-key or check failure)."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == _UNIQUE_VIOLATION
    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message


class BaseRepository[ModelType: Base]:
    """Base repository with get_by_id, get_all, create, update and delete.

    Every method flushes but never commits; the transaction belongs to the
    caller (request dependency or unit of work). Subclasses override
    _on_integrity_error to turn unique-key violations into domain Conflicts;
    any other integrity failure propagates unchanged.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """Return records with pagination."""
        result = await self.db.execute(select(self.model).offset(skip).limit(limit))
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record; unique violations go through _on_integrity_error."""
        self.db.add(obj)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            self._on_integrity_error(obj, exc)
            raise
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record and reload it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()

    async def delete_by_id(self, entity_id: str) -> bool:
        """Hard delete by primary key. Returns False when nothing was deleted."""
        model: Any = self.model
        result = await self.db.execute(sa_delete(self.model).where(model.id == entity_id))
        await self.db.flush()
        return (result.rowcount or 0) > 0

    def _on_integrity_error(self, obj: ModelType, exc: Exception) -> None:
        """Override to raise a domain exception for a known constraint."""
