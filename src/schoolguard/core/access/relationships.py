"""Relationship-based access to individual student records.

When the role check alone is not enough, a caller may still reach a
student record through one of three relations, tried in a fixed order:

1. self        - a student reading their own record
2. guardian    - a parent reading an active child's record
3. instructor  - a teacher reading the record of a student they teach

Each check performs exactly one targeted read against the record store.
Nothing is cached: facts are recomputed for every request.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict

from schoolguard.core.access.decision import Decision, DenyReason
from schoolguard.core.access.identity import Identity
from schoolguard.core.access.requirements import ALL_RELATIONS, Relation, ResourceRef
from schoolguard.core.access.roles import Role
from schoolguard.core.constants import STUDENT_RESOURCE
from schoolguard.core.errors import AuthorizationLookupError


logger = structlog.get_logger()

T = TypeVar("T")


class StudentRecord(BaseModel):
    """Read-only view of a student record as the resolver needs it.

    Attributes:
        id: Student record id
        user_id: Account id of the student
        parent_id: Account id of the parent, if one is linked
        class_id: Class the student is enrolled in
        is_active: False once the student has left or the record was retired
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    user_id: str
    parent_id: str | None = None
    class_id: str | None = None
    is_active: bool = True


class RecordStore(Protocol):
    """Read-only record store consumed by the resolver."""

    async def find_student_by_id(self, student_id: str) -> StudentRecord | None: ...

    async def find_student_by_user(self, user_id: str) -> StudentRecord | None: ...

    async def find_students_by_parent(self, parent_id: str) -> list[StudentRecord]: ...

    async def find_students_by_teacher(self, teacher_id: str) -> list[StudentRecord]: ...


# The single role each relation applies to.
RELATION_ROLES: dict[Relation, Role] = {
    Relation.SELF: Role.STUDENT,
    Relation.GUARDIAN: Role.PARENT,
    Relation.INSTRUCTOR: Role.TEACHER,
}


class _LookupFailed(Exception):
    pass


class RelationshipResolver:
    """Answers whether a principal is related to a target student record."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def _lookup(
        self, operation: str, call: Callable[[], Awaitable[T]], **context: str
    ) -> T:
        try:
            return await call()
        except Exception as exc:
            logger.exception(
                "relationship_lookup_failed",
                operation=operation,
                error_type=type(exc).__name__,
                **context,
            )
            raise _LookupFailed from exc

    async def resolve(
        self,
        identity: Identity,
        resource_ref: ResourceRef | None,
        relations: frozenset[Relation] = ALL_RELATIONS,
    ) -> Decision:
        """Decide access to ``resource_ref`` through the allowed relations.

        Returns:
            Allow via the first matching relation, or a Deny with
            ``not_related``, ``record_inactive`` or ``lookup_failed``
        """
        if (
            resource_ref is None
            or resource_ref.resource_type != STUDENT_RESOURCE
            or not resource_ref.is_wellformed
        ):
            return Decision.deny(DenyReason.NOT_RELATED, identity)

        student_id = str(resource_ref.resource_id)
        checks = {
            Relation.SELF: self._check_self,
            Relation.GUARDIAN: self._check_guardian,
            Relation.INSTRUCTOR: self._check_instructor,
        }

        for relation in Relation:
            if relation not in relations or RELATION_ROLES[relation] != identity.role:
                continue
            try:
                decision = await checks[relation](identity, student_id)
            except _LookupFailed:
                return Decision.deny(DenyReason.LOOKUP_FAILED, identity)
            if decision is not None:
                return decision

        return Decision.deny(DenyReason.NOT_RELATED, identity)

    async def is_authorized_by_relationship(
        self,
        identity: Identity,
        resource_ref: ResourceRef | None,
        relations: frozenset[Relation] = ALL_RELATIONS,
    ) -> bool:
        return (await self.resolve(identity, resource_ref, relations)).allowed

    async def _check_self(self, identity: Identity, student_id: str) -> Decision | None:
        record = await self._lookup(
            "find_student_by_id",
            lambda: self.store.find_student_by_id(student_id),
            student_id=student_id,
        )
        if record is not None and identity.principal_id in (record.user_id, record.id):
            return Decision.allow(identity, via=Relation.SELF)
        return None

    async def _check_guardian(
        self, identity: Identity, student_id: str
    ) -> Decision | None:
        record = await self._lookup(
            "find_student_by_id",
            lambda: self.store.find_student_by_id(student_id),
            student_id=student_id,
        )
        if record is None or record.parent_id != identity.principal_id:
            return None
        if not record.is_active:
            return Decision.deny(DenyReason.RECORD_INACTIVE, identity)
        return Decision.allow(identity, via=Relation.GUARDIAN)

    async def _check_instructor(
        self, identity: Identity, student_id: str
    ) -> Decision | None:
        taught = await self._lookup(
            "find_students_by_teacher",
            lambda: self.store.find_students_by_teacher(identity.principal_id),
            teacher_id=identity.principal_id,
        )
        if any(record.id == student_id for record in taught):
            return Decision.allow(identity, via=Relation.INSTRUCTOR)
        return None

    async def visible_student_ids(self, identity: Identity) -> set[str] | None:
        """Student ids a caller may see in list views.

        Returns:
            None for unrestricted access (admins), otherwise the set of ids

        Raises:
            AuthorizationLookupError: If the record store read fails
        """
        if identity.role == Role.ADMIN:
            return None

        principal_id = identity.principal_id
        try:
            if identity.role == Role.PARENT:
                children = await self._lookup(
                    "find_students_by_parent",
                    lambda: self.store.find_students_by_parent(principal_id),
                    parent_id=principal_id,
                )
                return {child.id for child in children if child.is_active}
            if identity.role == Role.TEACHER:
                taught = await self._lookup(
                    "find_students_by_teacher",
                    lambda: self.store.find_students_by_teacher(principal_id),
                    teacher_id=principal_id,
                )
                return {record.id for record in taught}
            own = await self._lookup(
                "find_student_by_user",
                lambda: self.store.find_student_by_user(principal_id),
                user_id=principal_id,
            )
        except _LookupFailed as exc:
            raise AuthorizationLookupError(
                details={"principal_id": principal_id}
            ) from exc
        return {own.id} if own is not None else set()
