"""Student service for business logic."""

from typing import Annotated

from fastapi import Depends

from schoolguard.core.errors import ConflictError, NotFoundError
from schoolguard.modules.students.models import Student
from schoolguard.modules.students.repos import StudentRepo
from schoolguard.modules.students.schemas import StudentCreate, StudentUpdate


class StudentService:
    """Service for student record operations.

    Access control happens before these methods are called; the service
    only deals with the records themselves.
    """

    def __init__(self, repo: StudentRepo) -> None:
        self.repo = repo

    async def create_student(self, data: StudentCreate) -> Student:
        """Create a student record.

        Raises:
            ConflictError: If the account already has a student record
        """
        if await self.repo.get_by_user_id(data.user_id):
            raise ConflictError(
                "Student record already exists for this user",
                error_code="student_exists",
                details={"user_id": data.user_id},
            )
        return await self.repo.create(Student(**data.model_dump()))

    async def get_student(self, student_id: str) -> Student:
        """Get a student record by id.

        Raises:
            NotFoundError: If no such record exists
        """
        student = await self.repo.get_by_id(student_id)
        if not student:
            raise NotFoundError(
                "Student not found", resource="student", resource_id=student_id
            )
        return student

    async def list_students(
        self,
        page: int,
        page_size: int,
        visible_ids: set[str] | None = None,
        is_active: bool | None = None,
    ) -> tuple[list[Student], int]:
        """List students, restricted to ``visible_ids`` when given."""
        offset = (page - 1) * page_size
        return await self.repo.list_students(
            offset=offset, limit=page_size, ids=visible_ids, is_active=is_active
        )

    async def update_student(self, student_id: str, data: StudentUpdate) -> Student:
        student = await self.get_student(student_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(student, field, value)
        return await self.repo.update(student)

    async def deactivate_student(self, student_id: str) -> Student:
        """Retire a student record; the row is kept with is_active=False."""
        student = await self.get_student(student_id)
        student.is_active = False
        return await self.repo.update(student)


StudentSvc = Annotated[StudentService, Depends(StudentService)]
