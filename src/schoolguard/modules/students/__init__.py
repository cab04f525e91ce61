"""Students module: student records guarded by the access engine."""

from fastapi import APIRouter


router = APIRouter(prefix="/students", tags=["students"])

from schoolguard.modules.students import routes  # noqa: E402, F401
