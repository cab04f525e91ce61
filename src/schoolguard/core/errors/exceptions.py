"""Request-level exceptions.

Raised from services and from the access dependencies; the handlers in
``schoolguard.core.errors.handlers`` turn them into Problem Details.
Startup misconfiguration (unknown roles, undeclared endpoints) uses plain
exceptions instead, since there is no request to answer.
"""

from typing import Any, ClassVar


class AppException(Exception):
    """Base class for errors that map to an HTTP response.

    Subclasses set the class-level defaults; ``message`` and ``error_code``
    may be overridden per raise. ``details`` become extension members of
    the problem body.
    """

    status_code: int = 500
    default_message: ClassVar[str] = "An unexpected error occurred"
    default_error_code: ClassVar[str] = "internal_error"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """A record addressed by the request does not exist."""

    status_code = 404
    default_message = "Resource not found"
    default_error_code = "not_found"

    def __init__(
        self,
        message: str | None = None,
        *,
        resource: str,
        resource_id: str,
    ) -> None:
        super().__init__(
            message, details={"resource": resource, "resource_id": resource_id}
        )


class ConflictError(AppException):
    status_code = 409
    default_message = "Resource conflict"
    default_error_code = "conflict"


class AuthorizationLookupError(AppException):
    """The record store failed while computing what a caller may see.

    Nothing is returned to the caller in this case.
    """

    status_code = 500
    default_message = "Access could not be verified"
    default_error_code = "lookup_failed"
