"""DTOs for accounts (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AccountResult:
    """Account read-model. No password."""

    id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None
    kind: str
    parish_id: str | None
    is_tenant_admin: bool
    status: str

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class AccountCreate:
    """Account fields supplied to provisioning. password None -> generated."""

    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    password: str | None = None
    parish_id: str | None = None
