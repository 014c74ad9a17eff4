"""Permission catalog and RBAC edge models.

Permission, RolePermission (role bindings), UserRole (role assignments) and
UserPermission (direct GRANT/REVOKE overrides).
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.domain.enums import PermissionType
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    DomainModel,
    StatusMixin,
    status_check,
    values_check,
)


class Permission(DomainModel, Base):
    """Permission. Table: permission. Global catalog, code is 'module.action'."""

    __tablename__ = "permission"

    code: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    module: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_permission_module_action", "module", "action"),
        status_check("permission"),
    )


class RolePermission(CuidMixin, Base):
    """Role-permission binding. Table: role_permission. No duplicate pair."""

    __tablename__ = "role_permission"

    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    permission_id: Mapped[str] = mapped_column(
        String, ForeignKey("permission.id", ondelete="CASCADE"), nullable=False
    )
    granted_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("account.id", ondelete="SET NULL"), nullable=True
    )
    granted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
        Index("ix_role_permission_role", "role_id"),
    )


class UserRole(CuidMixin, StatusMixin, Base):
    """Account-role assignment. Table: user_role. One row per pair (upserted)."""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    assigned_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("account.id", ondelete="SET NULL"), nullable=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_role"),
        Index("ix_user_role_user", "user_id"),
        status_check("user_role"),
    )


class UserPermission(CuidMixin, StatusMixin, Base):
    """Direct per-account override. Table: user_permission.

    At most one GRANT row and one REVOKE row per (user, permission), both upserted.
    """

    __tablename__ = "user_permission"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("account.id", ondelete="CASCADE"), nullable=False
    )
    permission_id: Mapped[str] = mapped_column(
        String, ForeignKey("permission.id", ondelete="CASCADE"), nullable=False
    )
    permission_type: Mapped[str] = mapped_column(String, nullable=False)
    assigned_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("account.id", ondelete="SET NULL"), nullable=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "permission_id", "permission_type", name="uq_user_permission_type"
        ),
        Index("ix_user_permission_user", "user_id"),
        values_check(
            "permission_type",
            PermissionType.values(),
            name="user_permission_type_check",
        ),
        status_check("user_permission"),
    )
