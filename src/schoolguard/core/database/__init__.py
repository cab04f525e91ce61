"""Database layer - session management, base models, and mixins."""

from schoolguard.core.database.base import Base, IdMixin, TimestampMixin, new_id
from schoolguard.core.database.session import (
    async_engine,
    async_session_factory,
    get_db,
)


__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "async_engine",
    "async_session_factory",
    "get_db",
    "new_id",
]
