"""Authentication schemas for token handling."""

from datetime import datetime

from pydantic import BaseModel

from schoolguard.core.access.roles import Role


class TokenData(BaseModel):
    """Data extracted from a verified access token.

    Attributes:
        principal_id: Account id of the token holder
        role: Role claimed by the token
        active: Account status at issuance
        exp: Token expiration time
        type: Token type
        jti: Unique token id
    """

    principal_id: str
    role: Role
    active: bool = True
    exp: datetime
    type: str = "access"
    jti: str | None = None
