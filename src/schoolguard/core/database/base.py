"""SQLAlchemy declarative base and common mixins."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, MetaData, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from schoolguard.core.constants import MAX_ID_LENGTH


def new_id() -> str:
    """Random UUID4 as text; ids are opaque strings across the API."""
    return str(uuid4())


# Deterministic constraint names, so the same schema is created on
# PostgreSQL and on the SQLite database used in tests
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class IdMixin:
    """Mixin that adds a string primary key."""

    id: Mapped[str] = mapped_column(
        String(MAX_ID_LENGTH),
        primary_key=True,
        default=new_id,
    )


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
