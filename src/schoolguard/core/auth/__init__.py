"""Authentication: JWT access tokens and credential verification."""

from schoolguard.core.auth.backend import (
    JWTCredentialVerifier,
    create_access_token,
    decode_token,
    extract_bearer,
)
from schoolguard.core.auth.schemas import TokenData


__all__ = [
    "JWTCredentialVerifier",
    "TokenData",
    "create_access_token",
    "decode_token",
    "extract_bearer",
]
