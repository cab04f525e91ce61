"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolguard.core.access.relationships import RecordStore
from schoolguard.core.database import get_db


# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


async def get_record_store(db: DBSession) -> RecordStore:
    """Record store the access engine reads relationship facts from."""
    from schoolguard.modules.students.repos import StudentRepository  # noqa: PLC0415

    return StudentRepository(db)


RecordStoreDep = Annotated[RecordStore, Depends(get_record_store)]
