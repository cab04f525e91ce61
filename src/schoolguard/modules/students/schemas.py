"""Pydantic schemas for student operations."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schoolguard.core.constants import (
    MAX_EMERGENCY_CONTACT_LENGTH,
    MAX_ID_LENGTH,
    MAX_NAME_LENGTH,
)


PHONE_PATTERN = r"^\+?[\d\s\-\(\)]+$"


class StudentBase(BaseModel):
    """Fields shared by create and response schemas."""

    parent_id: str | None = Field(None, max_length=MAX_ID_LENGTH)
    class_id: str | None = Field(None, max_length=MAX_ID_LENGTH)
    emergency_contact: str | None = Field(
        None, max_length=MAX_EMERGENCY_CONTACT_LENGTH, pattern=PHONE_PATTERN
    )
    admission_date: date | None = None


class StudentCreate(StudentBase):
    """Schema for creating a student record."""

    user_id: str = Field(..., min_length=1, max_length=MAX_ID_LENGTH)
    student_number: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)

    @field_validator("student_number")
    @classmethod
    def normalize_student_number(cls, v: str) -> str:
        return v.strip().upper()


class StudentUpdate(BaseModel):
    """Schema for updating a student record; only set fields are applied."""

    parent_id: str | None = Field(None, max_length=MAX_ID_LENGTH)
    class_id: str | None = Field(None, max_length=MAX_ID_LENGTH)
    emergency_contact: str | None = Field(
        None, max_length=MAX_EMERGENCY_CONTACT_LENGTH, pattern=PHONE_PATTERN
    )
    leaving_date: date | None = None
    is_active: bool | None = None

    @field_validator("is_active")
    @classmethod
    def reject_null_active_flag(cls, v: bool | None) -> bool:
        # May be omitted, but the column is NOT NULL
        if v is None:
            raise ValueError("is_active cannot be null")
        return v


class StudentResponse(StudentBase):
    """Schema for student response data."""

    id: str
    user_id: str
    student_number: str
    leaving_date: date | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StudentContactResponse(BaseModel):
    """Emergency contact details of a student."""

    id: str
    parent_id: str | None = None
    emergency_contact: str | None = None

    model_config = ConfigDict(from_attributes=True)


class StudentListResponse(BaseModel):
    """Schema for listing students."""

    items: list[StudentResponse]
    total: int
    page: int
    page_size: int
