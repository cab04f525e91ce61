"""Static role policy evaluation.

A caller is allowed when their role is listed on the requirement, or when
their role is at least as privileged as some listed role. Lower roles fall
through to the relationship resolver only if the requirement carries a
relationship qualifier.
"""

from schoolguard.core.access.decision import Decision, DenyReason
from schoolguard.core.access.identity import Identity
from schoolguard.core.access.requirements import OperationRequirement
from schoolguard.core.access.roles import is_at_least_as_privileged, least_privileged


def evaluate(identity: Identity, requirement: OperationRequirement) -> Decision:
    """Evaluate the role part of a requirement.

    Returns:
        Allow, Deny(insufficient_role) or NeedsRelationshipCheck
    """
    if identity.role in requirement.allowed_roles:
        return Decision.allow(identity, via="role")

    # Privilege escalates downward through the rank order.
    if is_at_least_as_privileged(
        identity.role, least_privileged(requirement.allowed_roles)
    ):
        return Decision.allow(identity, via="role_hierarchy")

    if requirement.has_relationship_qualifier:
        return Decision.needs_relationship_check(identity)

    return Decision.deny(DenyReason.INSUFFICIENT_ROLE, identity)
