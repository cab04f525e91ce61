"""FastAPI integration for the authorization pipeline.

Routes declare their access policy through ``require_access`` (or
``endpoint_policy`` for requirements kept in the policy registry). The
dependency runs the pipeline before the handler; on any denial it raises
and the handler is never called.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

import structlog
from fastapi import Depends, Request

from schoolguard.api.dependencies import RecordStoreDep
from schoolguard.config import settings
from schoolguard.core.access.decision import AccessDeniedError
from schoolguard.core.access.identity import Identity
from schoolguard.core.access.pipeline import AuthorizationPipeline
from schoolguard.core.access.requirements import (
    OperationRequirement,
    PolicyRegistry,
    ResourceRef,
)
from schoolguard.core.auth import JWTCredentialVerifier, extract_bearer


logger = structlog.get_logger()

_verifier = JWTCredentialVerifier()


async def get_pipeline(store: RecordStoreDep) -> AuthorizationPipeline:
    """Build the pipeline for the current request's record store."""
    return AuthorizationPipeline(_verifier, store)


Pipeline = Annotated[AuthorizationPipeline, Depends(get_pipeline)]


def get_raw_credential(request: Request) -> str | None:
    """Read the credential from the Authorization header, then the cookie."""
    token = extract_bearer(request.headers.get("Authorization"))
    if token is None:
        token = request.cookies.get(settings.credential_cookie_name) or None
    return token


def require_access(
    requirement: OperationRequirement,
    resource_param: str | None = None,
) -> Callable[..., Awaitable[Identity]]:
    """Dependency factory enforcing ``requirement`` on a route.

    Usage:
        @router.get("/{student_id}")
        async def get_student(
            student_id: str,
            identity: Annotated[Identity, Depends(require_access(req, "student_id"))],
        ):
            ...

    Args:
        requirement: Access policy of the endpoint
        resource_param: Path parameter holding the target student id, if any

    Returns:
        Dependency returning the caller's Identity

    Raises:
        AccessDeniedError: On any denial (401, 403 or 500 per reason)
    """

    async def dependency(request: Request, pipeline: Pipeline) -> Identity:
        resource_ref = None
        if resource_param is not None:
            resource_ref = ResourceRef.student(request.path_params.get(resource_param))

        decision = await pipeline.authorize(
            get_raw_credential(request), requirement, resource_ref
        )
        if not decision.allowed or decision.identity is None:
            denied = AccessDeniedError(decision)
            request.state.deny_reason = denied.reason.value
            raise denied

        identity = decision.identity
        request.state.user_id = identity.principal_id
        request.state.role = identity.role.value
        structlog.contextvars.bind_contextvars(
            user_id=identity.principal_id,
            role=identity.role.value,
        )
        return identity

    return dependency


def endpoint_policy(
    registry: PolicyRegistry,
    method: str,
    path: str,
    resource_param: str | None = None,
) -> Callable[..., Awaitable[Identity]]:
    """Like ``require_access`` but with the requirement taken from ``registry``.

    Raises:
        PolicyConfigurationError: At import time, if the endpoint is undeclared
    """
    return require_access(registry.get(method, path), resource_param)
