"""Parish (tenant), Ward and Family ORM models."""

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    DomainModel,
    ParishScopedMixin,
    status_check,
)


class Parish(DomainModel, Base):
    """Parish model. Table: parish. The tenant of every scoped row."""

    __tablename__ = "parish"

    name: Mapped[str] = mapped_column(String, nullable=False)
    diocese: Mapped[str | None] = mapped_column(String, nullable=True)
    city: Mapped[str | None] = mapped_column(String, nullable=True)
    country: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    timezone: Mapped[str] = mapped_column(String, nullable=False, default="UTC")

    __table_args__ = (status_check("parish"),)


class Ward(DomainModel, ParishScopedMixin, Base):
    """Ward model. Table: ward. Counters are derived from child rows."""

    __tablename__ = "ward"

    name: Mapped[str] = mapped_column(String, nullable=False)
    ward_number: Mapped[str | None] = mapped_column(String, nullable=True)
    total_families: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_members: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("parish_id", "ward_number", name="uq_ward_parish_number"),
        status_check("ward"),
    )


class Family(DomainModel, ParishScopedMixin, Base):
    """Family model. Table: family."""

    __tablename__ = "family"

    ward_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("ward.id", ondelete="SET NULL"), nullable=True, index=True
    )
    family_name: Mapped[str] = mapped_column(String, nullable=False)
    primary_contact_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("account.id", ondelete="SET NULL"), nullable=True
    )
    home_phone: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (status_check("family"),)
