"""Domain enumerations for the parish core.

Enums represent fixed sets of domain values (lifecycle status, account kind,
override type, provisioning saga state).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings.

        Returns:
            List of enum value strings (e.g. for validation or CHECK constraints).
        """
        return [member.value for member in cls]


class RecordStatus(_ValuesMixin, str, Enum):
    """Lifecycle status shared by every soft-deletable entity.

    Inactive rows are kept for traceability and contribute nothing to
    permission resolution.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"


class AccountKind(_ValuesMixin, str, Enum):
    """Kind of authentication account; selects the default role at provisioning."""

    SUPER_ADMIN = "super_admin"
    CHURCH_ADMIN = "church_admin"
    PARISHIONER = "parishioner"


class PermissionType(_ValuesMixin, str, Enum):
    """Direct per-user override type. REVOKE takes precedence over any grant."""

    GRANT = "GRANT"
    REVOKE = "REVOKE"


class SagaState(_ValuesMixin, str, Enum):
    """Provisioning saga states.

    Forward path: PENDING -> ROLE_VERIFIED -> ACCOUNT_CREATED -> ROLE_BOUND
    -> PROFILE_CREATED -> COMMITTED. COMPENSATING -> FAILED is reachable only
    once the account exists.
    """

    PENDING = "pending"
    ROLE_VERIFIED = "role_verified"
    ACCOUNT_CREATED = "account_created"
    ROLE_BOUND = "role_bound"
    PROFILE_CREATED = "profile_created"
    COMMITTED = "committed"
    COMPENSATING = "compensating"
    FAILED = "failed"


class BulkMode(_ValuesMixin, str, Enum):
    """Consistency policy for bulk family provisioning."""

    TRANSACTIONAL = "transactional"
    BATCH = "batch"
