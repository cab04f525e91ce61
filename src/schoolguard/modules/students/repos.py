"""Student repository for database operations.

Besides the CRUD used by the students routes, the repository is the
record store the relationship resolver reads from. Its ``find_*``
methods return read-only ``StudentRecord`` views and each issues a
single query.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy import func, select

from schoolguard.api.dependencies import DBSession
from schoolguard.core.access.relationships import StudentRecord
from schoolguard.modules.students.models import Student, TeachingAssignment


class StudentRepository:
    """Repository for Student database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    # ============================================================
    # Record store (read-only, used by the access engine)
    # ============================================================

    async def find_student_by_id(self, student_id: str) -> StudentRecord | None:
        student = await self.session.get(Student, student_id)
        return StudentRecord.model_validate(student) if student else None

    async def find_student_by_user(self, user_id: str) -> StudentRecord | None:
        student = await self.get_by_user_id(user_id)
        return StudentRecord.model_validate(student) if student else None

    async def find_students_by_parent(self, parent_id: str) -> list[StudentRecord]:
        stmt = select(Student).where(Student.parent_id == parent_id)
        result = await self.session.execute(stmt)
        return [StudentRecord.model_validate(s) for s in result.scalars().all()]

    async def find_students_by_teacher(self, teacher_id: str) -> list[StudentRecord]:
        """Students in every class the teacher is class or course teacher of."""
        stmt = (
            select(Student)
            .join(TeachingAssignment, TeachingAssignment.class_id == Student.class_id)
            .where(TeachingAssignment.teacher_id == teacher_id)
            .distinct()
        )
        result = await self.session.execute(stmt)
        return [StudentRecord.model_validate(s) for s in result.scalars().all()]

    # ============================================================
    # CRUD
    # ============================================================

    async def create(self, student: Student) -> Student:
        self.session.add(student)
        await self.session.flush()
        await self.session.refresh(student)
        return student

    async def get_by_id(self, student_id: str) -> Student | None:
        return await self.session.get(Student, student_id)

    async def get_by_user_id(self, user_id: str) -> Student | None:
        stmt = select(Student).where(Student.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_students(
        self,
        offset: int = 0,
        limit: int = 20,
        ids: set[str] | None = None,
        is_active: bool | None = None,
    ) -> tuple[list[Student], int]:
        """List students with pagination.

        Args:
            offset: Number of records to skip
            limit: Maximum number of records to return
            ids: Restrict the listing to these ids (None for no restriction)
            is_active: Optional filter on the active flag

        Returns:
            Tuple of (students, total_count)
        """
        stmt = select(Student)
        count_stmt = select(func.count()).select_from(Student)
        if ids is not None:
            stmt = stmt.where(Student.id.in_(ids))
            count_stmt = count_stmt.where(Student.id.in_(ids))
        if is_active is not None:
            stmt = stmt.where(Student.is_active == is_active)
            count_stmt = count_stmt.where(Student.is_active == is_active)

        total = (await self.session.execute(count_stmt)).scalar_one()
        result = await self.session.execute(
            stmt.order_by(Student.student_number).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    async def update(self, student: Student) -> Student:
        await self.session.flush()
        await self.session.refresh(student)
        return student

    async def assign_teacher(self, assignment: TeachingAssignment) -> TeachingAssignment:
        self.session.add(assignment)
        await self.session.flush()
        return assignment


StudentRepo = Annotated[StudentRepository, Depends(StudentRepository)]
