"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from schoolguard.core.access import Identity, Role, StudentRecord
from schoolguard.core.auth import create_access_token
from schoolguard.core.database import Base, get_db
from schoolguard.main import app as fastapi_app
from schoolguard.modules.students.models import Student, TeachingAssignment
from tests.factories import InMemoryRecordStore, StudentRecordFactory


# ============================================================
# In-memory collaborators
# ============================================================


@pytest.fixture
def admin() -> Identity:
    return Identity(principal_id="admin-1", role=Role.ADMIN)


@pytest.fixture
def teacher() -> Identity:
    return Identity(principal_id="teacher-1", role=Role.TEACHER)


@pytest.fixture
def student() -> Identity:
    return Identity(principal_id="student-1", role=Role.STUDENT)


@pytest.fixture
def parent() -> Identity:
    return Identity(principal_id="parent-1", role=Role.PARENT)


@pytest.fixture
def student_records() -> list[StudentRecord]:
    """S1: active child of parent-1 in class C1; S2: inactive child in C2;
    S3: someone else's child in C1."""
    return [
        StudentRecordFactory.build(
            id="S1", user_id="student-1", parent_id="parent-1", class_id="C1"
        ),
        StudentRecordFactory.build(
            id="S2",
            user_id="student-2",
            parent_id="parent-1",
            class_id="C2",
            is_active=False,
        ),
        StudentRecordFactory.build(
            id="S3", user_id="student-3", parent_id="parent-9", class_id="C1"
        ),
    ]


@pytest.fixture
def record_store(student_records: list[StudentRecord]) -> InMemoryRecordStore:
    """teacher-1 teaches class C1 only."""
    return InMemoryRecordStore(student_records, teaching={"teacher-1": {"C1"}})


# ============================================================
# Database
# ============================================================


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded_db(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Persist the same layout as ``student_records`` plus teaching assignments.

    teacher-1 is class teacher of C1, teacher-2 teaches a course in C2.
    """
    async with session_factory() as session:
        session.add_all(
            [
                Student(
                    id="S1",
                    user_id="student-1",
                    parent_id="parent-1",
                    class_id="C1",
                    student_number="STU-001",
                    emergency_contact="+1 555 0100",
                ),
                Student(
                    id="S2",
                    user_id="student-2",
                    parent_id="parent-1",
                    class_id="C2",
                    student_number="STU-002",
                    is_active=False,
                ),
                Student(
                    id="S3",
                    user_id="student-3",
                    parent_id="parent-9",
                    class_id="C1",
                    student_number="STU-003",
                ),
                TeachingAssignment(
                    teacher_id="teacher-1", class_id="C1", kind="class_teacher"
                ),
                TeachingAssignment(
                    teacher_id="teacher-2",
                    class_id="C2",
                    kind="course_teacher",
                    course_id="MATH-101",
                ),
            ]
        )
        await session.commit()


# ============================================================
# HTTP
# ============================================================


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, with the database swapped for SQLite."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Build an Authorization header for a principal."""

    def _headers(principal_id: str, role: Role, is_active: bool = True) -> dict[str, str]:
        token = create_access_token(principal_id, role, is_active=is_active)
        return {"Authorization": f"Bearer {token}"}

    return _headers
