"""Authorization decision engine.

Role model, identity context, role policy evaluation, relationship
resolution and the per-request pipeline that ties them together.
"""

from schoolguard.core.access.decision import (
    AccessDeniedError,
    Decision,
    DecisionOutcome,
    DenyReason,
)
from schoolguard.core.access.evaluator import evaluate
from schoolguard.core.access.identity import (
    CredentialVerifier,
    ExpiredCredentialError,
    Identity,
    InvalidCredentialError,
)
from schoolguard.core.access.pipeline import AuthorizationPipeline
from schoolguard.core.access.relationships import (
    RecordStore,
    RelationshipResolver,
    StudentRecord,
)
from schoolguard.core.access.requirements import (
    ALL_RELATIONS,
    OperationRequirement,
    PolicyConfigurationError,
    PolicyRegistry,
    Relation,
    ResourceRef,
)
from schoolguard.core.access.roles import (
    ROLE_RANKS,
    Role,
    UnknownRoleError,
    is_at_least_as_privileged,
    most_privileged,
    rank,
)


__all__ = [
    "ALL_RELATIONS",
    "ROLE_RANKS",
    "AccessDeniedError",
    "AuthorizationPipeline",
    "CredentialVerifier",
    "Decision",
    "DecisionOutcome",
    "DenyReason",
    "ExpiredCredentialError",
    "Identity",
    "InvalidCredentialError",
    "OperationRequirement",
    "PolicyConfigurationError",
    "PolicyRegistry",
    "RecordStore",
    "Relation",
    "RelationshipResolver",
    "ResourceRef",
    "Role",
    "StudentRecord",
    "UnknownRoleError",
    "evaluate",
    "is_at_least_as_privileged",
    "most_privileged",
    "rank",
]
