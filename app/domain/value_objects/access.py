"""Effective access: the tagged result of permission resolution.

``Unrestricted`` is the tenant-administrator bypass (the full catalog, no
role/override lookup). ``Scoped`` carries the resolved permission codes.
Guards call ``allows`` / ``missing`` and never need to know which variant
they hold.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Unrestricted:
    """Access for accounts flagged as tenant administrator."""

    def allows(self, code: str) -> bool:
        return True

    def missing(self, codes: Iterable[str]) -> list[str]:
        return []

    def allows_any(self, codes: Iterable[str]) -> bool:
        return True


@dataclass(frozen=True)
class Scoped:
    """Access limited to an explicit set of permission codes."""

    codes: frozenset[str] = field(default_factory=frozenset)

    def allows(self, code: str) -> bool:
        return code in self.codes

    def missing(self, codes: Iterable[str]) -> list[str]:
        """Return the codes not held, preserving the requested order."""
        return [c for c in codes if c not in self.codes]

    def allows_any(self, codes: Iterable[str]) -> bool:
        return any(c in self.codes for c in codes)


EffectiveAccess = Unrestricted | Scoped
