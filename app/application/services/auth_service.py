"""Credential check for login."""

import logging
from collections.abc import Callable

from app.application.dtos.account import AccountResult
from app.application.dtos.mappers import account_to_result
from app.application.interfaces.repositories import IAccountRepository
from app.domain.exceptions import AuthenticationException

logger = logging.getLogger(__name__)

PasswordVerifier = Callable[[str, str | None], bool]


class AuthService:
    """Authenticates an account by e-mail and password."""

    def __init__(
        self, account_repo: IAccountRepository, verify_password: PasswordVerifier
    ) -> None:
        self._account_repo = account_repo
        self._verify_password = verify_password

    async def authenticate(self, email: str, password: str) -> AccountResult:
        """Return the active account for the credentials.

        Unknown e-mail, wrong password and inactive account all raise the
        same error.

        Raises:
            AuthenticationException: Credentials do not identify an active account.
        """
        account = await self._account_repo.get_by_email(email)
        hashed = account.hashed_password if account is not None else None
        if not self._verify_password(password, hashed) or account is None:
            logger.info("Login failed for %s", email)
            raise AuthenticationException("Invalid credentials")
        if account.status != "active":
            logger.info("Login refused for inactive account %s", account.id)
            raise AuthenticationException("Invalid credentials")
        return account_to_result(account)
