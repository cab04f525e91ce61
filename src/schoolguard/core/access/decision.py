"""Authorization outcomes and the reasons attached to denials."""

from dataclasses import dataclass
from enum import StrEnum

from schoolguard.core.access.identity import Identity
from schoolguard.core.errors import AppException


class DecisionOutcome(StrEnum):
    ALLOW = "allow"
    DENY = "deny"
    NEEDS_RELATIONSHIP_CHECK = "needs_relationship_check"


class DenyReason(StrEnum):
    """Why a request was denied.

    Authentication-stage reasons surface as 401, authorization-stage
    reasons as 403 and infrastructure failures as 500.
    """

    NO_CREDENTIAL = "no_credential"
    INVALID_CREDENTIAL = "invalid_credential"
    ACCOUNT_DEACTIVATED = "account_deactivated"
    INSUFFICIENT_ROLE = "insufficient_role"
    NOT_RELATED = "not_related"
    RECORD_INACTIVE = "record_inactive"
    LOOKUP_FAILED = "lookup_failed"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_STATUS_CODES: dict[DenyReason, int] = {
    DenyReason.NO_CREDENTIAL: 401,
    DenyReason.INVALID_CREDENTIAL: 401,
    DenyReason.ACCOUNT_DEACTIVATED: 401,
    DenyReason.INSUFFICIENT_ROLE: 403,
    DenyReason.NOT_RELATED: 403,
    DenyReason.RECORD_INACTIVE: 403,
    DenyReason.LOOKUP_FAILED: 500,
}

_MESSAGES: dict[DenyReason, str] = {
    DenyReason.NO_CREDENTIAL: "No credential provided",
    DenyReason.INVALID_CREDENTIAL: "Invalid or expired credential",
    DenyReason.ACCOUNT_DEACTIVATED: "User account is deactivated",
    DenyReason.INSUFFICIENT_ROLE: "Insufficient permissions",
    DenyReason.NOT_RELATED: "You can only access records you are related to",
    DenyReason.RECORD_INACTIVE: "The requested record is no longer active",
    DenyReason.LOOKUP_FAILED: "Access could not be verified",
}


@dataclass(frozen=True)
class Decision:
    """Result of evaluating a request against an operation requirement.

    Attributes:
        outcome: Allow, deny, or "ask the relationship resolver"
        reason: Set only when the outcome is a denial
        identity: The caller, once a credential has been verified
        matched_relation: Name of the relation that granted access, if any
    """

    outcome: DecisionOutcome
    reason: DenyReason | None = None
    identity: Identity | None = None
    matched_relation: str | None = None

    @classmethod
    def allow(
        cls, identity: Identity | None = None, via: str | None = None
    ) -> "Decision":
        return cls(DecisionOutcome.ALLOW, identity=identity, matched_relation=via)

    @classmethod
    def deny(cls, reason: DenyReason, identity: Identity | None = None) -> "Decision":
        return cls(DecisionOutcome.DENY, reason=reason, identity=identity)

    @classmethod
    def needs_relationship_check(cls, identity: Identity | None = None) -> "Decision":
        return cls(DecisionOutcome.NEEDS_RELATIONSHIP_CHECK, identity=identity)

    @property
    def allowed(self) -> bool:
        return self.outcome is DecisionOutcome.ALLOW

    @property
    def status_code(self) -> int:
        """HTTP status for the routing layer (200 on allow)."""
        return self.reason.status_code if self.reason else 200


class AccessDeniedError(AppException):
    """Raised when a protected operation is refused.

    The status code and error code follow the denial reason; the original
    Decision is kept on the exception for callers that need it.
    """

    def __init__(self, decision: Decision) -> None:
        reason = decision.reason or DenyReason.INSUFFICIENT_ROLE
        self.decision = decision
        self.reason = reason
        self.status_code = reason.status_code
        super().__init__(message=reason.message, error_code=reason.value)
