"""Domain profiles attached to an account: Parishioner and ChurchAdmin."""

from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    DomainModel,
    ParishScopedMixin,
    status_check,
)


class Parishioner(DomainModel, ParishScopedMixin, Base):
    """Parishioner profile. Table: parishioner. One per account."""

    __tablename__ = "parishioner"

    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    ward_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("ward.id", ondelete="SET NULL"), nullable=True, index=True
    )
    family_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("family.id", ondelete="SET NULL"), nullable=True, index=True
    )
    middle_name: Mapped[str | None] = mapped_column(String, nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String, nullable=True)
    occupation: Mapped[str | None] = mapped_column(String, nullable=True)
    member_status: Mapped[str] = mapped_column(
        String, nullable=False, default="active"
    )
    address_line1: Mapped[str | None] = mapped_column(String, nullable=True)
    address_line2: Mapped[str | None] = mapped_column(String, nullable=True)
    city: Mapped[str | None] = mapped_column(String, nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (status_check("parishioner"),)


class ChurchAdmin(DomainModel, ParishScopedMixin, Base):
    """Church administrator profile. Table: church_admin. One per account."""

    __tablename__ = "church_admin"

    account_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    role_title: Mapped[str | None] = mapped_column(String, nullable=True)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    is_primary_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (status_check("church_admin"),)
