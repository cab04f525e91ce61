"""Identity context and the contract of the credential verifier.

An ``Identity`` is produced only by a ``CredentialVerifier`` from a
verified credential. The access engine reads it and never changes it.
"""

from typing import Protocol

from pydantic import BaseModel, ConfigDict

from schoolguard.core.access.roles import Role


class Identity(BaseModel):
    """The authenticated principal attached to one request.

    Attributes:
        principal_id: Account id of the caller
        role: The caller's role
        is_active: Whether the account is currently active
    """

    model_config = ConfigDict(frozen=True)

    principal_id: str
    role: Role
    is_active: bool = True


class InvalidCredentialError(Exception):
    """Raised by a verifier when a credential is malformed or not trusted."""


class ExpiredCredentialError(InvalidCredentialError):
    """Raised by a verifier when a credential was valid but has expired."""


class CredentialVerifier(Protocol):
    """Authentication collaborator consumed by the authorization pipeline."""

    async def verify(self, raw_token: str) -> Identity:
        """Turn a raw credential into an Identity.

        Raises:
            InvalidCredentialError: If the credential is malformed or untrusted
            ExpiredCredentialError: If the credential has expired
        """
        ...
