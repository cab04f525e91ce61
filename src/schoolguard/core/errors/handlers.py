"""RFC 7807 Problem Details rendering.

Every error leaving the API, access denials included, has the same body
shape. Denials add ``error_code`` so clients can tell a missing credential
from a missing relationship without parsing the ``type`` URI.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from schoolguard.config import settings
from schoolguard.core.errors.exceptions import AppException


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()

PROBLEM_MEDIA_TYPE = "application/problem+json"


class FieldError(BaseModel):
    """One invalid field of a request body, query or path."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response schema.

    Attributes:
        type: URI of the error's documentation page
        title: Short summary derived from the error code
        status: HTTP status code
        detail: Explanation of this occurrence
        instance: Request path
        error_code: Machine-readable code, e.g. ``not_related``
        errors: Field errors, for validation failures only
        trace_id: Request id echoed in the ``X-Request-ID`` header
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    error_code: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def _problem(
    request: Request,
    status_code: int,
    error_code: str,
    detail: str,
    *,
    title: str | None = None,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{error_code}",
        title=title or error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        error_code=error_code,
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)
    for key, value in (extra or {}).items():
        body.setdefault(key, value)
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers=headers,
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _challenge(error_code: str) -> dict[str, str]:
    """Bearer challenge (RFC 6750) for a 401."""
    if error_code == "no_credential":
        return {"WWW-Authenticate": "Bearer"}
    return {"WWW-Authenticate": f'Bearer error="invalid_token", error_code="{error_code}"'}


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "app_exception",
        error_code=exc.error_code,
        status_code=exc.status_code,
        path=request.url.path,
        details=exc.details,
    )
    headers = _challenge(exc.error_code) if exc.status_code == 401 else None
    return _problem(
        request,
        exc.status_code,
        exc.error_code,
        exc.message,
        extra=exc.details,
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append(
            FieldError(
                field=".".join(loc) or "unknown",
                message=error.get("msg", "Invalid value"),
                type=error.get("type"),
            )
        )

    logger.info("validation_error", path=request.url.path, error_count=len(errors))
    return _problem(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        errors=errors,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected failures: details go to the log, never to the client."""
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return _problem(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
        title="Internal Server Error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)
