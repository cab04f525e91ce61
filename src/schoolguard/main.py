"""FastAPI application for the school record API.

Importing this module configures logging and builds ``app``. Importing the
routes also imports ``schoolguard.policies``, so a route without a policy
declaration stops the process here rather than serving an unguarded
endpoint.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schoolguard import __version__
from schoolguard.api import api_router
from schoolguard.config import settings
from schoolguard.core.database import async_engine
from schoolguard.core.errors import register_exception_handlers
from schoolguard.core.logging import (
    RequestIdMiddleware,
    RequestLoggingMiddleware,
    configure_logging,
)
from schoolguard.policies import POLICIES


configure_logging(settings.log_level, json_output=settings.is_production)

logger = structlog.get_logger()

# Frontend dev servers allowed when no origins are configured in development
DEV_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
        protected_endpoints=len(POLICIES),
        policies_frozen=POLICIES.frozen,
    )
    for (method, path), requirement in POLICIES.items():
        logger.debug(
            "access_policy", method=method, path=path, **requirement.describe()
        )
    yield
    logger.info("application_shutdown")
    await async_engine.dispose()


def _cors_origins() -> list[str]:
    if settings.cors_origins:
        return settings.cors_origins
    return DEV_ORIGINS if settings.is_development else []


def create_app() -> FastAPI:
    """Build the application with its middleware, error handlers and routes."""
    docs_enabled = not settings.is_production
    app = FastAPI(
        title=settings.app_name,
        description="Student records API guarded by role and relationship checks",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    # The credential cookie needs allow_credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "WWW-Authenticate"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    # Outermost: the request id must be bound before anything logs
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
