"""Per-request authorization pipeline.

States, terminal at the first Deny or Allow::

    Unauthenticated -> IdentityBuilt -> RoleChecked -> [RelationshipChecked] -> Decided

``authorize`` never raises: every failure on the way is turned into a
Decision. ``guard`` runs a protected operation at most once, and only
after an Allow.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

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
from schoolguard.core.access.relationships import RecordStore, RelationshipResolver
from schoolguard.core.access.requirements import OperationRequirement, ResourceRef


logger = structlog.get_logger()

R = TypeVar("R")


class AuthorizationPipeline:
    """Orchestrates authentication, role policy and relationship checks.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(self, verifier: CredentialVerifier, store: RecordStore) -> None:
        self.verifier = verifier
        self.resolver = RelationshipResolver(store)

    async def authenticate(self, raw_credential: str | None) -> Identity | Decision:
        """Build the identity for a request, or the Deny that ends it."""
        if raw_credential is None or not raw_credential.strip():
            return Decision.deny(DenyReason.NO_CREDENTIAL)

        try:
            identity = await self.verifier.verify(raw_credential.strip())
        except ExpiredCredentialError:
            logger.info("credential_expired")
            return Decision.deny(DenyReason.INVALID_CREDENTIAL)
        except InvalidCredentialError as exc:
            logger.info("credential_invalid", error=str(exc))
            return Decision.deny(DenyReason.INVALID_CREDENTIAL)
        except Exception:
            logger.exception("credential_verifier_failed")
            return Decision.deny(DenyReason.LOOKUP_FAILED)

        if not identity.is_active:
            return Decision.deny(DenyReason.ACCOUNT_DEACTIVATED, identity)
        return identity

    async def authorize(
        self,
        raw_credential: str | None,
        requirement: OperationRequirement,
        resource_ref: ResourceRef | None = None,
    ) -> Decision:
        """Decide whether the request may run the operation behind ``requirement``."""
        authenticated = await self.authenticate(raw_credential)
        if isinstance(authenticated, Decision):
            return self._log(authenticated, requirement, resource_ref)
        identity = authenticated

        decision = evaluate(identity, requirement)
        if decision.outcome is DecisionOutcome.NEEDS_RELATIONSHIP_CHECK:
            decision = await self.resolver.resolve(
                identity, resource_ref, requirement.relations
            )

        return self._log(decision, requirement, resource_ref)

    async def guard(
        self,
        raw_credential: str | None,
        requirement: OperationRequirement,
        resource_ref: ResourceRef | None,
        operation: Callable[[Identity], Awaitable[R]],
    ) -> R:
        """Authorize, then run ``operation`` with the caller's identity.

        Raises:
            AccessDeniedError: If the decision is not Allow; ``operation`` is
                not called in that case
        """
        decision = await self.authorize(raw_credential, requirement, resource_ref)
        if not decision.allowed or decision.identity is None:
            raise AccessDeniedError(decision)
        return await operation(decision.identity)

    @staticmethod
    def _log(
        decision: Decision,
        requirement: OperationRequirement,
        resource_ref: ResourceRef | None,
    ) -> Decision:
        identity = decision.identity
        fields = {
            "principal_id": identity.principal_id if identity else None,
            "role": identity.role.value if identity else None,
            "resource_type": resource_ref.resource_type if resource_ref else None,
            "resource_id": resource_ref.resource_id if resource_ref else None,
            "allowed_roles": sorted(requirement.allowed_roles),
        }
        if decision.allowed:
            logger.info("access_granted", via=decision.matched_relation, **fields)
        else:
            log = logger.error if decision.status_code >= 500 else logger.warning
            log("access_denied", reason=decision.reason, **fields)
        return decision
