"""Tests for domain exceptions (error_code, message, details) and their HTTP status."""

import pytest

from app.core.exception_handlers import status_for
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AuthenticationException,
    AuthorizationException,
    ConfigurationException,
    DuplicateAssignmentException,
    ParishException,
    ProvisioningFailedException,
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    SystemRoleImmutableException,
    ValidationException,
)


def test_parish_exception_default_error_code() -> None:
    """Base ParishException uses class name as error_code when not provided."""
    exc = ParishException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "ParishException"
    assert exc.details == {}
    assert exc.to_dict() == {
        "error": "ParishException",
        "message": "Something failed",
        "details": {},
    }


def test_validation_exception_with_field() -> None:
    exc = ValidationException("Invalid format", field="email")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "email"}


def test_authorization_exception_single_code_message() -> None:
    exc = AuthorizationException(["events.create"])
    assert exc.message == "Permission denied: events.create"
    assert exc.details == {"missing_permissions": ["events.create"], "mode": "one"}


def test_authorization_exception_any_mode_lists_candidates() -> None:
    exc = AuthorizationException(["events.create", "events.update"], mode="any")
    assert exc.message == "Permission denied. Required one of: events.create, events.update"


def test_authorization_exception_all_mode_lists_missing() -> None:
    exc = AuthorizationException(["roles.view", "roles.update"], mode="all")
    assert exc.message == "Permission denied. Missing: roles.view, roles.update"


def test_authorization_exception_explicit_message() -> None:
    exc = AuthorizationException(message="Global roles are read-only here")
    assert exc.message == "Global roles are read-only here"
    assert exc.details == {}


def test_system_role_immutable_names_role_and_operation() -> None:
    exc = SystemRoleImmutableException("FAMILY_MEMBER", "delete")
    assert exc.error_code == "SYSTEM_ROLE_IMMUTABLE"
    assert exc.details == {"role_code": "FAMILY_MEMBER", "operation": "delete"}


def test_provisioning_failed_message_is_generic() -> None:
    exc = ProvisioningFailedException()
    assert "try again" in exc.message
    assert exc.details == {}


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (ValidationException("bad"), 400),
        (AuthenticationException(), 401),
        (AuthorizationException(["a.b"]), 403),
        (SystemRoleImmutableException("SUPER_ADMIN", "update"), 403),
        (ResourceNotFoundException("role", "r1"), 404),
        (RoleAlreadyExistsException("WARD_X"), 409),
        (AccountAlreadyExistsException("a@b.org"), 409),
        (DuplicateAssignmentException("dup", "user_role"), 409),
        (ConfigurationException("missing role"), 500),
        (ProvisioningFailedException(), 500),
        (ParishException("unknown"), 500),
    ],
)
def test_status_for_maps_error_taxonomy(exc: ParishException, status: int) -> None:
    assert status_for(exc) == status
