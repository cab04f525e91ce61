"""JWT access tokens: issuance and verification.

Verification turns a raw bearer token into an ``Identity``; it is the
credential verifier the authorization pipeline is wired with.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from schoolguard.config import settings
from schoolguard.core.access.identity import (
    ExpiredCredentialError,
    Identity,
    InvalidCredentialError,
)
from schoolguard.core.access.roles import Role, UnknownRoleError
from schoolguard.core.auth.schemas import TokenData
from schoolguard.core.constants import ACCESS_TOKEN_JTI_LENGTH, ACCESS_TOKEN_TYPE


def create_access_token(
    principal_id: str,
    role: Role,
    is_active: bool = True,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed JWT access token.

    Args:
        principal_id: Account id of the token holder
        role: The holder's role
        is_active: Account status to embed in the token
        expires_delta: Optional custom lifetime
        additional_claims: Optional extra claims to include

    Returns:
        Encoded JWT access token
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode: dict[str, Any] = {
        "sub": str(principal_id),
        "role": Role.parse(role).value,
        "active": is_active,
        "exp": now + expires_delta,
        "iat": now,
        "type": ACCESS_TOKEN_TYPE,
        "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),
    }

    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenData:
    """Decode and validate a JWT access token.

    The ``role`` claim may be a role name or a legacy integer role code.

    Raises:
        ExpiredCredentialError: If the token has expired
        InvalidCredentialError: If the token is malformed, badly signed,
            of the wrong type or names an unknown role
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as exc:
        raise ExpiredCredentialError("Token expired") from exc
    except JWTError as exc:
        raise InvalidCredentialError("Invalid token") from exc

    subject = payload.get("sub")
    exp = payload.get("exp")
    token_type = payload.get("type", ACCESS_TOKEN_TYPE)
    if not subject or exp is None:
        raise InvalidCredentialError("Token is missing required claims")
    if token_type != ACCESS_TOKEN_TYPE:
        raise InvalidCredentialError("Invalid token type")

    try:
        role = Role.parse(payload.get("role"))
    except UnknownRoleError as exc:
        raise InvalidCredentialError(str(exc)) from exc

    return TokenData(
        principal_id=str(subject),
        role=role,
        active=bool(payload.get("active", True)),
        exp=datetime.fromtimestamp(exp, tz=UTC),
        type=token_type,
        jti=payload.get("jti"),
    )


def extract_bearer(authorization: str | None) -> str | None:
    """Return the token of a ``Bearer`` Authorization header, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class JWTCredentialVerifier:
    """Credential verifier backed by signed JWT access tokens."""

    async def verify(self, raw_token: str) -> Identity:
        token_data = decode_token(raw_token)
        return Identity(
            principal_id=token_data.principal_id,
            role=token_data.role,
            is_active=token_data.active,
        )
