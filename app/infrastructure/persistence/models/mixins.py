"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TimestampMixin, StatusMixin, ParishScopedMixin and the
status_check() helper that builds the per-table CHECK constraint for
RecordStatus.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from app.domain.enums import RecordStatus
from app.shared.utils.generators import generate_cuid


def _in_list(values: list[str]) -> str:
    return ", ".join("'{}'".format(v.replace("'", "''")) for v in values)


def status_check(table: str) -> CheckConstraint:
    """CHECK constraint restricting ``status`` to RecordStatus values."""
    return CheckConstraint(
        f"status IN ({_in_list(RecordStatus.values())})",
        name=f"{table}_status_check",
    )


def values_check(column: str, values: list[str], name: str) -> CheckConstraint:
    """CHECK constraint restricting a string column to a fixed set of values."""
    return CheckConstraint(f"{column} IN ({_in_list(values)})", name=name)


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class StatusMixin:
    """Mixin for soft lifecycle: status is 'active' or 'inactive', never a hard delete."""

    @declared_attr
    def status(cls) -> Mapped[str]:
        return mapped_column(
            String, nullable=False, default=RecordStatus.ACTIVE.value, index=True
        )

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE.value


class ParishScopedMixin:
    """Mixin for domain rows owned by a parish (tenant). parish_id FK with CASCADE."""

    @declared_attr
    def parish_id(cls) -> Mapped[str]:
        return mapped_column(
            String,
            ForeignKey("parish.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class DomainModel(CuidMixin, TimestampMixin, StatusMixin):
    """Combined mixin: CUID + created_at/updated_at + status."""

    __abstract__ = True
