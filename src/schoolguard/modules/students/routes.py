"""Student API routes.

Every route declares its access policy through ``endpoint_policy``; the
handler body only runs once the authorization pipeline has allowed the
request.
"""

from typing import Annotated

from fastapi import Depends, Query, Response, status

from schoolguard.api.dependencies import RecordStoreDep
from schoolguard.core.access import Identity, RelationshipResolver
from schoolguard.core.access.dependencies import endpoint_policy
from schoolguard.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from schoolguard.modules.students import router
from schoolguard.modules.students.schemas import (
    StudentContactResponse,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)
from schoolguard.modules.students.services import StudentSvc
from schoolguard.policies import POLICIES


def _policy(
    method: str, path: str, resource_param: str | None = None
) -> type[Identity]:
    return Annotated[  # type: ignore[return-value]
        Identity, Depends(endpoint_policy(POLICIES, method, path, resource_param))
    ]


StaffCaller = _policy("GET", "/students")
LinkedCaller = _policy("GET", "/students/linked")
CreateCaller = _policy("POST", "/students")
RecordCaller = _policy("GET", "/students/{student_id}", "student_id")
ContactsCaller = _policy("GET", "/students/{student_id}/contacts", "student_id")
UpdateCaller = _policy("PUT", "/students/{student_id}", "student_id")
DeleteCaller = _policy("DELETE", "/students/{student_id}", "student_id")


def _list_response(
    students: list, total: int, page: int, page_size: int
) -> StudentListResponse:
    return StudentListResponse(
        items=[StudentResponse.model_validate(s) for s in students],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "",
    response_model=StudentListResponse,
    summary="List students",
    description="List all student records. Requires the teacher or admin role.",
)
async def list_students(
    _caller: StaffCaller,
    service: StudentSvc,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"
    ),
    is_active: bool | None = Query(None, description="Filter on the active flag"),
) -> StudentListResponse:
    students, total = await service.list_students(page, page_size, is_active=is_active)
    return _list_response(students, total, page, page_size)


@router.get(
    "/linked",
    response_model=StudentListResponse,
    summary="List my students",
    description=(
        "Students the caller is related to: a parent's active children, "
        "a teacher's pupils, a student's own record. Admins see everyone."
    ),
)
async def list_linked_students(
    caller: LinkedCaller,
    service: StudentSvc,
    store: RecordStoreDep,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"
    ),
) -> StudentListResponse:
    visible_ids = await RelationshipResolver(store).visible_student_ids(caller)
    students, total = await service.list_students(page, page_size, visible_ids)
    return _list_response(students, total, page, page_size)


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create student",
    description="Create a student record. Requires the admin role.",
)
async def create_student(
    data: StudentCreate,
    _caller: CreateCaller,
    service: StudentSvc,
) -> StudentResponse:
    student = await service.create_student(data)
    return StudentResponse.model_validate(student)


@router.get(
    "/{student_id}",
    response_model=StudentResponse,
    summary="Get student",
    description=(
        "Staff can read any student record; a parent only their child's, "
        "a student only their own."
    ),
)
async def get_student(
    student_id: str,
    _caller: RecordCaller,
    service: StudentSvc,
) -> StudentResponse:
    student = await service.get_student(student_id)
    return StudentResponse.model_validate(student)


@router.get(
    "/{student_id}/contacts",
    response_model=StudentContactResponse,
    summary="Get student contacts",
    description=(
        "Emergency contact details. Admins, the student, their parent and "
        "teachers of the student's class may read them."
    ),
)
async def get_student_contacts(
    student_id: str,
    _caller: ContactsCaller,
    service: StudentSvc,
) -> StudentContactResponse:
    student = await service.get_student(student_id)
    return StudentContactResponse.model_validate(student)


@router.put(
    "/{student_id}",
    response_model=StudentResponse,
    summary="Update student",
    description="Update a student record. Requires the admin role.",
)
async def update_student(
    student_id: str,
    data: StudentUpdate,
    _caller: UpdateCaller,
    service: StudentSvc,
) -> StudentResponse:
    student = await service.update_student(student_id, data)
    return StudentResponse.model_validate(student)


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate student",
    description="Retire a student record. Requires the admin role.",
)
async def delete_student(
    student_id: str,
    _caller: DeleteCaller,
    service: StudentSvc,
) -> Response:
    await service.deactivate_student(student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
