"""Only unique-key violations become domain Conflicts."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.domain.exceptions import AccountAlreadyExistsException, RoleAlreadyExistsException
from app.infrastructure.persistence.repositories import AccountRepository, RoleRepository
from app.infrastructure.persistence.repositories.base import is_unique_violation


class _PgError(Exception):
    def __init__(self, message: str, sqlstate: str) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def _error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, orig)


UNIQUE_PG = _error(
    _PgError('duplicate key value violates unique constraint "uq_role_tenant_code"', "23505")
)
FOREIGN_KEY_PG = _error(
    _PgError('insert or update on table "role" violates foreign key constraint', "23503")
)
UNIQUE_SQLITE = _error(Exception("UNIQUE constraint failed: account.email"))
FOREIGN_KEY_SQLITE = _error(Exception("FOREIGN KEY constraint failed"))


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (UNIQUE_PG, True),
        (FOREIGN_KEY_PG, False),
        (UNIQUE_SQLITE, True),
        (FOREIGN_KEY_SQLITE, False),
    ],
)
def test_is_unique_violation(exc: IntegrityError, expected: bool) -> None:
    assert is_unique_violation(exc) is expected


def test_account_duplicate_email_is_a_conflict() -> None:
    repo = AccountRepository(MagicMock())
    with pytest.raises(AccountAlreadyExistsException):
        repo._on_integrity_error(SimpleNamespace(email="a@b.org"), UNIQUE_SQLITE)


def test_account_foreign_key_failure_is_not_a_conflict() -> None:
    repo = AccountRepository(MagicMock())
    # Returns without raising; BaseRepository.create re-raises the IntegrityError.
    repo._on_integrity_error(SimpleNamespace(email="a@b.org"), FOREIGN_KEY_PG)


def test_role_unique_and_foreign_key_failures() -> None:
    repo = RoleRepository(MagicMock())
    role = SimpleNamespace(code="FEAST_PLANNER", tenant_id="p1")
    with pytest.raises(RoleAlreadyExistsException):
        repo._on_integrity_error(role, UNIQUE_PG)
    repo._on_integrity_error(role, FOREIGN_KEY_SQLITE)
