"""System role codes and the account-kind to default-role mapping."""

from app.domain.enums import AccountKind


class SystemRoles:
    """Global roles created by catalog seeding (immutable at runtime)."""

    SUPER_ADMIN = "SUPER_ADMIN"
    CHURCH_ADMIN = "CHURCH_ADMIN"
    FAMILY_MEMBER = "FAMILY_MEMBER"


class WardRoles:
    """Global ward-level roles created by catalog seeding."""

    CONVENER = "WARD_CONVENER"
    SECRETARY = "WARD_SECRETARY"
    TREASURER = "WARD_TREASURER"
    PRAYER_COORDINATOR = "WARD_PRAYER_COORD"
    YOUTH_LEADER = "WARD_YOUTH_LEADER"
    CATECHISM_TEACHER = "WARD_CATECHISM"
    SOCIAL_SERVICE = "WARD_SOCIAL_SERVICE"
    FAMILY_APOSTOLATE = "WARD_FAMILY_APOSTOLATE"
    CHOIR_LEADER = "WARD_CHOIR_LEADER"
    SACRISTAN = "WARD_SACRISTAN"


DEFAULT_ROLE_BY_KIND: dict[AccountKind, str] = {
    AccountKind.SUPER_ADMIN: SystemRoles.SUPER_ADMIN,
    AccountKind.CHURCH_ADMIN: SystemRoles.CHURCH_ADMIN,
    AccountKind.PARISHIONER: SystemRoles.FAMILY_MEMBER,
}


def default_role_for_kind(kind: AccountKind | str) -> str:
    """Return the default role code for an account kind (FAMILY_MEMBER when unmapped)."""
    try:
        kind = AccountKind(kind)
    except ValueError:
        return SystemRoles.FAMILY_MEMBER
    return DEFAULT_ROLE_BY_KIND.get(kind, SystemRoles.FAMILY_MEMBER)
