"""Role model: the closed set of roles and their privilege ranking.

Lower rank means more privilege. Every comparison between roles goes
through ``rank`` so no call site depends on raw integers.
"""

from collections.abc import Iterable
from enum import StrEnum


class UnknownRoleError(ValueError):
    """Raised when a value does not name one of the known roles."""


class Role(StrEnum):
    """The four roles of the institution."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"

    @classmethod
    def from_code(cls, code: int) -> "Role":
        """Map a legacy integer role code (1=admin .. 4=parent) to a Role.

        Raises:
            UnknownRoleError: If the code is not a known role code
        """
        try:
            return _LEGACY_CODES[code]
        except (KeyError, TypeError):
            raise UnknownRoleError(f"Unknown role code: {code!r}") from None

    @classmethod
    def parse(cls, value: "str | int | Role") -> "Role":
        """Accept a Role, a role name or a legacy integer code.

        Raises:
            UnknownRoleError: If the value does not identify a role
        """
        if isinstance(value, Role):
            return value
        if isinstance(value, bool):
            raise UnknownRoleError(f"Unknown role: {value!r}")
        if isinstance(value, int):
            return cls.from_code(value)
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized.isdigit():
                return cls.from_code(int(normalized))
            try:
                return cls(normalized)
            except ValueError:
                pass
        raise UnknownRoleError(f"Unknown role: {value!r}")

    @property
    def code(self) -> int:
        """Legacy integer code for this role."""
        return ROLE_RANKS[self]


ROLE_RANKS: dict[Role, int] = {
    Role.ADMIN: 1,
    Role.TEACHER: 2,
    Role.STUDENT: 3,
    Role.PARENT: 4,
}

_LEGACY_CODES: dict[int, Role] = {rank_: role for role, rank_ in ROLE_RANKS.items()}

if set(ROLE_RANKS) != set(Role) or len(_LEGACY_CODES) != len(ROLE_RANKS):
    raise RuntimeError("Role rank table must cover every role with distinct ranks")


def rank(role: Role) -> int:
    """Return the privilege rank of a role (1 is the most privileged)."""
    return ROLE_RANKS[role]


def is_at_least_as_privileged(role_a: Role, role_b: Role) -> bool:
    """True iff ``role_a`` carries at least the privilege of ``role_b``."""
    return rank(role_a) <= rank(role_b)


def most_privileged(roles: Iterable[Role]) -> Role:
    """Return the most privileged role of a non-empty collection.

    Raises:
        ValueError: If ``roles`` is empty
    """
    return min(roles, key=rank)


def least_privileged(roles: Iterable[Role]) -> Role:
    """Return the least privileged role of a non-empty collection.

    Raises:
        ValueError: If ``roles`` is empty
    """
    return max(roles, key=rank)
