"""Account repository. E-mail is stored lower-cased and is globally unique."""

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import RecordStatus
from app.domain.exceptions import AccountAlreadyExistsException
from app.infrastructure.persistence.models.account import Account
from app.infrastructure.persistence.repositories.base import (
    BaseRepository,
    is_unique_violation,
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountRepository(BaseRepository[Account]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Account)

    def _on_integrity_error(self, obj: Account, exc: Exception) -> None:
        if isinstance(exc, IntegrityError) and is_unique_violation(exc):
            raise AccountAlreadyExistsException(obj.email) from None

    async def get_by_email(self, email: str) -> Account | None:
        result = await self.db.execute(
            select(Account).where(Account.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        result = await self.db.execute(
            select(func.count())
            .select_from(Account)
            .where(Account.email == normalize_email(email))
        )
        return (result.scalar() or 0) > 0

    async def existing_emails(self, emails: list[str]) -> set[str]:
        """Return the subset of emails (normalized) that already have an account."""
        wanted = {normalize_email(e) for e in emails if e}
        if not wanted:
            return set()
        result = await self.db.execute(
            select(Account.email).where(Account.email.in_(wanted))
        )
        return set(result.scalars().all())

    async def create_account(
        self,
        *,
        email: str,
        hashed_password: str,
        first_name: str,
        last_name: str,
        kind: str,
        phone: str | None = None,
        parish_id: str | None = None,
        is_tenant_admin: bool = False,
    ) -> Account:
        return await self.create(
            Account(
                email=normalize_email(email),
                hashed_password=hashed_password,
                first_name=first_name,
                last_name=last_name,
                phone=phone,
                kind=kind,
                parish_id=parish_id,
                is_tenant_admin=is_tenant_admin,
                status=RecordStatus.ACTIVE.value,
            )
        )

    async def get_in_parish(self, account_id: str, parish_id: str | None) -> Account | None:
        """Return the account when it belongs to parish_id (any parish when None)."""
        q = select(Account).where(Account.id == account_id)
        if parish_id is not None:
            q = q.where(Account.parish_id == parish_id)
        result = await self.db.execute(q)
        return result.scalar_one_or_none()

    async def deactivate(self, account: Account) -> Account:
        account.status = RecordStatus.INACTIVE.value
        return await self.update(account)
