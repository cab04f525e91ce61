"""Operation requirements, resource references and the endpoint policy table.

Requirements are declared once at startup and are read-only afterwards,
so a single instance can be shared by every concurrent request.
"""

from dataclasses import dataclass, field
from enum import StrEnum

import structlog

from schoolguard.core.access.roles import Role, UnknownRoleError
from schoolguard.core.constants import STUDENT_RESOURCE


logger = structlog.get_logger()


class PolicyConfigurationError(Exception):
    """Raised when the declared endpoint policies are missing or contradictory."""


class Relation(StrEnum):
    """Relationships that can qualify a caller for a specific student record.

    Declaration order is the order in which the resolver tries them.
    """

    SELF = "self"
    GUARDIAN = "guardian"
    INSTRUCTOR = "instructor"


ALL_RELATIONS: frozenset[Relation] = frozenset(Relation)


@dataclass(frozen=True)
class OperationRequirement:
    """Access policy declared for one endpoint.

    Attributes:
        allowed_roles: Roles granted access by role alone (plus every more
            privileged role)
        relations: Relations that may grant access when the role check fails;
            empty means the requirement has no relationship qualifier
    """

    allowed_roles: frozenset[Role]
    relations: frozenset[Relation] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.allowed_roles:
            raise PolicyConfigurationError("A requirement must allow at least one role")
        for role in self.allowed_roles:
            if not isinstance(role, Role):
                raise UnknownRoleError(f"Unknown role in requirement: {role!r}")

    @classmethod
    def roles(cls, *roles: Role) -> "OperationRequirement":
        """Requirement satisfied by role alone."""
        return cls(frozenset(roles))

    @classmethod
    def related(
        cls,
        *roles: Role,
        relations: frozenset[Relation] = ALL_RELATIONS,
    ) -> "OperationRequirement":
        """Requirement that falls back to a relationship check."""
        return cls(frozenset(roles), frozenset(relations))

    @property
    def has_relationship_qualifier(self) -> bool:
        return bool(self.relations)

    def describe(self) -> dict[str, list[str]]:
        return {
            "allowed_roles": sorted(self.allowed_roles),
            "relations": sorted(self.relations),
        }


@dataclass(frozen=True)
class ResourceRef:
    """Identifies the record a request targets.

    The id is used exactly as the route received it. An empty id, or one
    with surrounding whitespace, marks a malformed reference.
    """

    resource_type: str
    resource_id: str | None

    @classmethod
    def student(cls, student_id: str | None) -> "ResourceRef":
        return cls(STUDENT_RESOURCE, student_id)

    @property
    def is_wellformed(self) -> bool:
        return (
            bool(self.resource_type)
            and bool(self.resource_id)
            and self.resource_id == self.resource_id.strip()
        )


class PolicyRegistry:
    """Maps ``(method, path template)`` to the requirement declared for it.

    The registry is the single source of truth per endpoint: declaring the
    same endpoint twice with different requirements is a configuration error,
    and looking up an undeclared endpoint is one as well.
    """

    def __init__(self) -> None:
        self._policies: dict[tuple[str, str], OperationRequirement] = {}
        self._frozen = False

    @staticmethod
    def _key(method: str, path: str) -> tuple[str, str]:
        return method.upper(), path.rstrip("/") or "/"

    def declare(
        self, method: str, path: str, requirement: OperationRequirement
    ) -> OperationRequirement:
        """Declare the requirement for an endpoint.

        Re-declaring an identical requirement is accepted.

        Raises:
            PolicyConfigurationError: If the registry is frozen or the endpoint
                already has a different requirement
        """
        if self._frozen:
            raise PolicyConfigurationError(
                f"Policy registry is frozen; cannot declare {method} {path}"
            )
        key = self._key(method, path)
        existing = self._policies.get(key)
        if existing is not None and existing != requirement:
            raise PolicyConfigurationError(
                f"Contradictory declarations for {key[0]} {key[1]}: "
                f"{existing.describe()} vs {requirement.describe()}"
            )
        self._policies[key] = requirement
        return requirement

    def get(self, method: str, path: str) -> OperationRequirement:
        """Return the requirement for an endpoint.

        Raises:
            PolicyConfigurationError: If the endpoint was never declared
        """
        try:
            return self._policies[self._key(method, path)]
        except KeyError:
            raise PolicyConfigurationError(
                f"No access policy declared for {method.upper()} {path}"
            ) from None

    def freeze(self) -> None:
        self._frozen = True
        logger.info("policy_registry_frozen", endpoints=len(self._policies))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._policies)

    def items(self) -> list[tuple[tuple[str, str], OperationRequirement]]:
        return sorted(self._policies.items())
