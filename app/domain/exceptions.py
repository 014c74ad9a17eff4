"""Domain exceptions for the parish core.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers by error_code.
"""

from typing import Any


class ParishException(Exception):
    """Base exception for all parish core errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ParishException):
    """Raised when input validation fails (malformed input, bad cross-reference, scope mismatch)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(ParishException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(ParishException):
    """Raised when the account lacks the permission code(s) a guard requires.

    The message names the missing code(s). ``mode`` is 'one', 'any' or 'all'
    depending on which guard rejected the request.
    """

    def __init__(
        self,
        missing: list[str] | None = None,
        *,
        mode: str = "one",
        message: str | None = None,
    ) -> None:
        """Initialize with the missing permission codes.

        Args:
            missing: Permission codes the account does not hold.
            mode: Guard kind: 'one', 'any' or 'all'.
            message: Optional explicit message (overrides the generated one).
        """
        missing = list(missing or [])
        if message is None:
            if not missing:
                message = "Permission denied"
            elif mode == "any":
                message = f"Permission denied. Required one of: {', '.join(missing)}"
            elif mode == "all":
                message = f"Permission denied. Missing: {', '.join(missing)}"
            else:
                message = f"Permission denied: {missing[0]}"
        details: dict[str, Any] = {}
        if missing:
            details["missing_permissions"] = missing
            details["mode"] = mode
        super().__init__(message, "PERMISSION_DENIED", details)


class SystemRoleImmutableException(ParishException):
    """Raised when an operation would mutate, delete or create a system role."""

    def __init__(self, role_code: str, operation: str) -> None:
        """Initialize with the system role code and the refused operation.

        Args:
            role_code: Code of the system role.
            operation: Refused operation (e.g. 'update', 'delete', 'create').
        """
        super().__init__(
            f"System role '{role_code}' cannot be modified ({operation})",
            "SYSTEM_ROLE_IMMUTABLE",
            {"role_code": role_code, "operation": operation},
        )


class ResourceNotFoundException(ParishException):
    """Raised when a requested resource is not found (or lies outside the caller's tenant)."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'role', 'permission').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RoleAlreadyExistsException(ParishException):
    """Raised when creating a role whose code already exists in the requested scope."""

    def __init__(self, code: str, tenant_id: str | None = None) -> None:
        """Initialize with the duplicate role code and scope.

        Args:
            code: The role code that already exists.
            tenant_id: Requested scope (None for global).
        """
        super().__init__(
            f"Role with code '{code}' already exists",
            "ROLE_ALREADY_EXISTS",
            {"code": code, "tenant_id": tenant_id},
        )


class AccountAlreadyExistsException(ParishException):
    """Raised when an account with the same email is already registered."""

    def __init__(self, email: str | None = None) -> None:
        details = {"email": email} if email else {}
        super().__init__(
            "An account with this email already exists",
            "ACCOUNT_ALREADY_EXISTS",
            details,
        )


class DuplicateAssignmentException(ParishException):
    """Raised when assigning a role/permission that is already assigned (unique constraint)."""

    def __init__(
        self,
        message: str,
        assignment_type: str,
        details_extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message and assignment context.

        Args:
            message: Human-readable description (e.g. 'Permission already bound to role').
            assignment_type: 'role_permission' or 'user_role'.
            details_extra: Optional extra keys (e.g. role_id, permission_id).
        """
        details = dict(details_extra or {})
        details["assignment_type"] = assignment_type
        super().__init__(message, "DUPLICATE_ASSIGNMENT", details)


class ConfigurationException(ParishException):
    """Raised on deployment bugs the caller cannot fix (e.g. missing default role)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "CONFIGURATION_ERROR", details)


class ProvisioningFailedException(ParishException):
    """Raised when a provisioning step failed and was compensated.

    The message is deliberately generic; storage details are logged, not exposed.
    """

    def __init__(
        self,
        message: str = "Failed to complete account provisioning. Please try again or contact support.",
    ) -> None:
        super().__init__(message, "PROVISIONING_FAILED")
