#!/usr/bin/env python
"""
Create the schema and demo records for development, and print one access
token per demo account so the access rules can be tried with curl.
"""

import argparse
import asyncio
import sys

from sqlalchemy import select


# Add src to path for imports
sys.path.insert(0, "src")

from schoolguard.core.access import Role
from schoolguard.core.auth import create_access_token
from schoolguard.core.database import Base, async_engine, async_session_factory
from schoolguard.modules.students.models import Student, TeachingAssignment


DEMO_ACCOUNTS: dict[str, Role] = {
    "admin-1": Role.ADMIN,
    "teacher-1": Role.TEACHER,
    "teacher-2": Role.TEACHER,
    "student-1": Role.STUDENT,
    "student-2": Role.STUDENT,
    "parent-1": Role.PARENT,
}


async def create_schema() -> None:
    """Create all tables that do not exist yet."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Schema ready")


async def seed_demo() -> None:
    """Create two students, one parent and two class teachers."""
    async with async_session_factory() as session:
        result = await session.execute(select(Student).where(Student.id == "S1"))
        if result.scalar_one_or_none():
            print("Demo records already exist")
            return

        session.add_all(
            [
                Student(
                    id="S1",
                    user_id="student-1",
                    parent_id="parent-1",
                    class_id="C1",
                    student_number="STU-001",
                ),
                Student(
                    id="S2",
                    user_id="student-2",
                    parent_id="parent-1",
                    class_id="C2",
                    student_number="STU-002",
                    is_active=False,
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
        print("Created demo students S1 (active) and S2 (inactive)")


def print_tokens() -> None:
    for principal_id, role in DEMO_ACCOUNTS.items():
        print(f"{principal_id:<10} {role.value:<8} {create_access_token(principal_id, role)}")


async def main(scenario: str) -> None:
    """Run the seeding based on scenario."""
    await create_schema()
    if scenario == "demo":
        await seed_demo()
        print_tokens()
    elif scenario != "schema":
        print(f"Unknown scenario: {scenario}")
        print("Available scenarios: schema, demo")
        sys.exit(1)
    await async_engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with demo data")
    parser.add_argument(
        "--scenario",
        "-s",
        default="demo",
        help="Seed scenario to run (schema, demo)",
    )
    args = parser.parse_args()

    asyncio.run(main(args.scenario))
