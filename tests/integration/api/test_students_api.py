"""End-to-end tests of the student routes through the authorization pipeline."""

import pytest
from httpx import AsyncClient

from schoolguard.core.access import Role


pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("seeded_db")]


class TestAuthentication:
    async def test_no_credential(self, client: AsyncClient):
        response = await client.get("/api/v1/students")

        assert response.status_code == 401
        data = response.json()
        assert data["title"] == "No Credential"
        assert data["error_code"] == "no_credential"
        assert response.headers["content-type"] == "application/problem+json"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_invalid_credential(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/students", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/invalid_credential")
        assert "invalid_token" in response.headers["WWW-Authenticate"]

    async def test_deactivated_account(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/students/S1",
            headers=auth_headers("admin-1", Role.ADMIN, is_active=False),
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "User account is deactivated"

    async def test_token_cookie_is_accepted(self, client: AsyncClient, auth_headers):
        token = auth_headers("admin-1", Role.ADMIN)["Authorization"].split(" ", 1)[1]
        client.cookies.set("token", token)

        response = await client.get("/api/v1/students")

        assert response.status_code == 200


class TestListStudents:
    async def test_teacher_lists_all(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/students", headers=auth_headers("teacher-1", Role.TEACHER)
        )

        assert response.status_code == 200
        assert response.json()["total"] == 3

    @pytest.mark.parametrize(
        ("principal_id", "role"),
        [("student-1", Role.STUDENT), ("parent-1", Role.PARENT)],
    )
    async def test_lower_roles_forbidden(
        self, client: AsyncClient, auth_headers, principal_id, role
    ):
        response = await client.get(
            "/api/v1/students", headers=auth_headers(principal_id, role)
        )

        assert response.status_code == 403
        assert response.json()["type"].endswith("/errors/insufficient_role")

    @pytest.mark.parametrize(
        ("principal_id", "role", "expected"),
        [
            ("admin-1", Role.ADMIN, {"S1", "S2", "S3"}),
            ("teacher-1", Role.TEACHER, {"S1", "S3"}),
            ("parent-1", Role.PARENT, {"S1"}),
            ("student-2", Role.STUDENT, {"S2"}),
        ],
    )
    async def test_linked_students_are_scoped(
        self, client: AsyncClient, auth_headers, principal_id, role, expected
    ):
        response = await client.get(
            "/api/v1/students/linked", headers=auth_headers(principal_id, role)
        )

        assert response.status_code == 200
        assert {item["id"] for item in response.json()["items"]} == expected


class TestGetStudent:
    @pytest.mark.parametrize(
        ("principal_id", "role"),
        [
            ("admin-1", Role.ADMIN),
            ("teacher-2", Role.TEACHER),
            ("student-1", Role.STUDENT),
            ("parent-1", Role.PARENT),
        ],
    )
    async def test_allowed(self, client: AsyncClient, auth_headers, principal_id, role):
        response = await client.get(
            "/api/v1/students/S1", headers=auth_headers(principal_id, role)
        )

        assert response.status_code == 200
        assert response.json()["student_number"] == "STU-001"

    async def test_student_cannot_read_classmate(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/students/S3", headers=auth_headers("student-1", Role.STUDENT)
        )

        assert response.status_code == 403
        assert response.json()["type"].endswith("/errors/not_related")

    async def test_parent_of_inactive_child(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/students/S2", headers=auth_headers("parent-1", Role.PARENT)
        )

        assert response.status_code == 403
        assert response.json()["type"].endswith("/errors/record_inactive")

    async def test_parent_of_unknown_student_is_not_related(
        self, client: AsyncClient, auth_headers
    ):
        response = await client.get(
            "/api/v1/students/S404", headers=auth_headers("parent-1", Role.PARENT)
        )

        assert response.status_code == 403

    async def test_padded_id_is_not_matched_to_the_record(
        self, client: AsyncClient, auth_headers
    ):
        response = await client.get(
            "/api/v1/students/S1%20", headers=auth_headers("parent-1", Role.PARENT)
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "not_related"

    async def test_admin_gets_404_for_unknown_student(
        self, client: AsyncClient, auth_headers
    ):
        response = await client.get(
            "/api/v1/students/S404", headers=auth_headers("admin-1", Role.ADMIN)
        )

        assert response.status_code == 404


class TestStudentContacts:
    async def test_class_teacher_allowed(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/students/S3/contacts", headers=auth_headers("teacher-1", Role.TEACHER)
        )

        assert response.status_code == 200
        assert response.json()["parent_id"] == "parent-9"

    async def test_teacher_of_other_class_denied(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/students/S1/contacts", headers=auth_headers("teacher-2", Role.TEACHER)
        )

        assert response.status_code == 403
        assert response.json()["type"].endswith("/errors/not_related")

    async def test_guardian_allowed(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/students/S1/contacts", headers=auth_headers("parent-1", Role.PARENT)
        )

        assert response.status_code == 200
        assert response.json()["emergency_contact"] == "+1 555 0100"


class TestWrites:
    async def test_admin_creates_student(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/students",
            json={"user_id": "student-5", "student_number": "stu-005", "class_id": "C1"},
            headers=auth_headers("admin-1", Role.ADMIN),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["student_number"] == "STU-005"
        assert data["is_active"] is True

    async def test_duplicate_student_conflicts(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/students",
            json={"user_id": "student-1", "student_number": "STU-009"},
            headers=auth_headers("admin-1", Role.ADMIN),
        )

        assert response.status_code == 409

    async def test_teacher_cannot_create(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/students",
            json={"user_id": "student-5", "student_number": "STU-005"},
            headers=auth_headers("teacher-1", Role.TEACHER),
        )

        assert response.status_code == 403

    async def test_denied_write_never_reaches_handler(
        self, client: AsyncClient, auth_headers
    ):
        response = await client.put(
            "/api/v1/students/S1",
            json={"class_id": "C9"},
            headers=auth_headers("parent-1", Role.PARENT),
        )
        assert response.status_code == 403

        check = await client.get(
            "/api/v1/students/S1", headers=auth_headers("admin-1", Role.ADMIN)
        )
        assert check.json()["class_id"] == "C1"

    async def test_admin_updates_student(self, client: AsyncClient, auth_headers):
        response = await client.put(
            "/api/v1/students/S1",
            json={"emergency_contact": "+44 20 7946 0000"},
            headers=auth_headers("admin-1", Role.ADMIN),
        )

        assert response.status_code == 200
        assert response.json()["emergency_contact"] == "+44 20 7946 0000"

    async def test_null_active_flag_is_rejected(self, client: AsyncClient, auth_headers):
        admin = auth_headers("admin-1", Role.ADMIN)
        response = await client.put(
            "/api/v1/students/S1", json={"is_active": None}, headers=admin
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "is_active"

        check = await client.get("/api/v1/students/S1", headers=admin)
        assert check.json()["is_active"] is True

    async def test_omitted_active_flag_is_left_alone(
        self, client: AsyncClient, auth_headers
    ):
        response = await client.put(
            "/api/v1/students/S1",
            json={"class_id": "C2"},
            headers=auth_headers("admin-1", Role.ADMIN),
        )

        assert response.status_code == 200
        assert response.json()["is_active"] is True

    async def test_deactivation_cuts_off_guardian(self, client: AsyncClient, auth_headers):
        parent = auth_headers("parent-1", Role.PARENT)
        assert (await client.get("/api/v1/students/S1", headers=parent)).status_code == 200

        response = await client.delete(
            "/api/v1/students/S1", headers=auth_headers("admin-1", Role.ADMIN)
        )
        assert response.status_code == 204

        after = await client.get("/api/v1/students/S1", headers=parent)
        assert after.status_code == 403
        assert after.json()["type"].endswith("/errors/record_inactive")

        own = await client.get(
            "/api/v1/students/S1", headers=auth_headers("student-1", Role.STUDENT)
        )
        assert own.status_code == 200
