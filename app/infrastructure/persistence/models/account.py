"""Account ORM model (the authenticated principal)."""

from sqlalchemy import Boolean, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import AccountKind
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    DomainModel,
    status_check,
    values_check,
)


class Account(DomainModel, Base):
    """Account model. Table: account. E-mail is globally unique.

    parish_id is the tenant scope of the account (NULL for super admins).
    is_tenant_admin marks a parish administrator that bypasses permission
    resolution.
    """

    __tablename__ = "account"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    kind: Mapped[str] = mapped_column(String, nullable=False)
    parish_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("parish.id", ondelete="SET NULL"), nullable=True, index=True
    )
    is_tenant_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    __table_args__ = (
        values_check("kind", AccountKind.values(), name="account_kind_check"),
        status_check("account"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
