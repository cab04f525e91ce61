"""Error handling module with RFC 7807 Problem Details."""

from schoolguard.core.errors.exceptions import (
    AppException,
    AuthorizationLookupError,
    ConflictError,
    NotFoundError,
)
from schoolguard.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    "AppException",
    "AuthorizationLookupError",
    "ConflictError",
    "FieldError",
    "NotFoundError",
    "ProblemDetail",
    "register_exception_handlers",
]
