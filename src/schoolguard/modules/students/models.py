"""Student and teaching-assignment database models."""

from datetime import date

from sqlalchemy import Boolean, Date, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from schoolguard.core.constants import (
    MAX_EMERGENCY_CONTACT_LENGTH,
    MAX_ID_LENGTH,
    MAX_NAME_LENGTH,
)
from schoolguard.core.database.base import Base, IdMixin, TimestampMixin


class Student(Base, IdMixin, TimestampMixin):
    """A student enrolment record.

    Attributes:
        user_id: Account id of the student (one record per account)
        parent_id: Account id of the parent, if linked
        class_id: Class the student is enrolled in
        student_number: Institution-issued student number (upper-cased)
        emergency_contact: Phone number to call in an emergency
        admission_date: Date of admission
        leaving_date: Date the student left, if any
        is_active: False once the record is retired
    """

    __tablename__ = "students"

    user_id: Mapped[str] = mapped_column(
        String(MAX_ID_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(MAX_ID_LENGTH),
        nullable=True,
        index=True,
    )
    class_id: Mapped[str | None] = mapped_column(
        String(MAX_ID_LENGTH),
        nullable=True,
        index=True,
    )
    student_number: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
        index=True,
    )
    emergency_contact: Mapped[str | None] = mapped_column(
        String(MAX_EMERGENCY_CONTACT_LENGTH),
        nullable=True,
    )
    admission_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    leaving_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )


class TeachingAssignment(Base, IdMixin):
    """Links a teacher to a class, either as class teacher or course teacher.

    Attributes:
        teacher_id: Account id of the teacher
        class_id: Class taught
        kind: "class_teacher" or "course_teacher"
        course_id: Course taught, for course teachers
    """

    __tablename__ = "teaching_assignments"
    __table_args__ = (
        UniqueConstraint("teacher_id", "class_id", "kind", "course_id"),
    )

    teacher_id: Mapped[str] = mapped_column(
        String(MAX_ID_LENGTH),
        nullable=False,
        index=True,
    )
    class_id: Mapped[str] = mapped_column(
        String(MAX_ID_LENGTH),
        nullable=False,
        index=True,
    )
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    course_id: Mapped[str | None] = mapped_column(
        String(MAX_ID_LENGTH),
        nullable=True,
    )
