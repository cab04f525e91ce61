"""In-memory stand-ins for the record store and the credential verifier."""

from collections import Counter

from schoolguard.core.access import (
    ExpiredCredentialError,
    Identity,
    InvalidCredentialError,
    StudentRecord,
)


class InMemoryRecordStore:
    """Record store backed by dicts; counts every lookup it serves."""

    def __init__(
        self,
        students: list[StudentRecord] | None = None,
        teaching: dict[str, set[str]] | None = None,
    ) -> None:
        self.students = {s.id: s for s in students or []}
        # teacher id -> class ids taught
        self.teaching = teaching or {}
        self.calls: Counter[str] = Counter()

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    async def find_student_by_id(self, student_id: str) -> StudentRecord | None:
        self.calls["find_student_by_id"] += 1
        return self.students.get(student_id)

    async def find_student_by_user(self, user_id: str) -> StudentRecord | None:
        self.calls["find_student_by_user"] += 1
        return next((s for s in self.students.values() if s.user_id == user_id), None)

    async def find_students_by_parent(self, parent_id: str) -> list[StudentRecord]:
        self.calls["find_students_by_parent"] += 1
        return [s for s in self.students.values() if s.parent_id == parent_id]

    async def find_students_by_teacher(self, teacher_id: str) -> list[StudentRecord]:
        self.calls["find_students_by_teacher"] += 1
        classes = self.teaching.get(teacher_id, set())
        return [s for s in self.students.values() if s.class_id in classes]


class FailingRecordStore:
    """Record store whose every read fails."""

    def __init__(self) -> None:
        self.calls = 0

    async def _fail(self, *_args: object) -> None:
        self.calls += 1
        raise ConnectionError("record store unavailable")

    find_student_by_id = _fail
    find_student_by_user = _fail
    find_students_by_parent = _fail
    find_students_by_teacher = _fail


class StaticVerifier:
    """Credential verifier that knows a fixed set of tokens."""

    def __init__(self, identities: dict[str, Identity] | None = None) -> None:
        self.identities = identities or {}
        self.expired: set[str] = set()
        self.calls = 0

    async def verify(self, raw_token: str) -> Identity:
        self.calls += 1
        if raw_token in self.expired:
            raise ExpiredCredentialError("Token expired")
        try:
            return self.identities[raw_token]
        except KeyError:
            raise InvalidCredentialError("Unknown token") from None
