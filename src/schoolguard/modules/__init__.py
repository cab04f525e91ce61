"""Feature modules with auto-discovery."""

from importlib import import_module
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Return the routers of every module package that exposes ``router``.

    Import errors propagate: a module that cannot load would otherwise
    leave its endpoints silently missing.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if path.is_dir() and not path.name.startswith("_"):
            module = import_module(f"schoolguard.modules.{path.name}")
            if hasattr(module, "router"):
                routers.append(module.router)
                logger.info("module_loaded", module=path.name)

    return routers
