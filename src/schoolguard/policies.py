"""Access policy declared for every protected endpoint.

This table is the single source of truth for who may call what. It is
built at import time and frozen; routes look their requirement up here,
so an endpoint without a declaration fails at startup.
"""

from schoolguard.core.access import (
    OperationRequirement,
    PolicyRegistry,
    Relation,
    Role,
)


ADMIN_ONLY = OperationRequirement.roles(Role.ADMIN)
STAFF = OperationRequirement.roles(Role.ADMIN, Role.TEACHER)
ANY_ROLE = OperationRequirement.roles(Role.PARENT)

# Staff see any student; parents and students only through a relationship.
STUDENT_RECORD = OperationRequirement.related(
    Role.ADMIN,
    Role.TEACHER,
    relations=frozenset({Relation.SELF, Relation.GUARDIAN}),
)

# Contact details: teachers only for students they teach.
STUDENT_CONTACTS = OperationRequirement.related(Role.ADMIN)


def build_registry() -> PolicyRegistry:
    """Declare the policy of every endpoint and freeze the registry."""
    registry = PolicyRegistry()

    registry.declare("GET", "/students", STAFF)
    registry.declare("GET", "/students/linked", ANY_ROLE)
    registry.declare("POST", "/students", ADMIN_ONLY)
    registry.declare("GET", "/students/{student_id}", STUDENT_RECORD)
    registry.declare("GET", "/students/{student_id}/contacts", STUDENT_CONTACTS)
    registry.declare("PUT", "/students/{student_id}", ADMIN_ONLY)
    registry.declare("DELETE", "/students/{student_id}", ADMIN_ONLY)

    registry.freeze()
    return registry


POLICIES = build_registry()
