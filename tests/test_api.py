"""End-to-end tests of the HTTP API against a temporary database."""

from collections.abc import Generator
from pathlib import Path

import pytest
from conftest import TEST_PASSWORD, TEST_SECRET_KEY, RecordingNotifier
from fastapi.testclient import TestClient

from institute import AppConfig, configure_fastapi_app

OWNER_EMAIL = "owner@hans.edu.np"

COURSE = {
    "title": "Science",
    "description": "+2 Science with Physics, Chemistry and Biology",
    "duration": "2 years",
    "level": "+2",
}

INQUIRY = {
    "name": "Ram Bahadur",
    "email": "ram@mail.com.np",
    "phone": "9800000000",
    "message": "What are the fees for the BBS program?",
}


@pytest.fixture
def client(tmp_path: Path, notifier: RecordingNotifier) -> Generator[TestClient, None, None]:
    """Client for an app seeded with a super admin account."""
    config = AppConfig(
        database_path=str(tmp_path / "data" / "site.db"),
        logging_level="INFO",
        root_path="",
        secret_key=TEST_SECRET_KEY,
        algorithm="HS512",
        access_token_expire_minutes=60,
        password_min_length=8,
        mail_api_key=None,
        mail_api_url="https://mail.test/emails",
        mail_from="Site <site@mail.test>",
        institute_name="Hans Educational Institute",
        seed_admin_email=OWNER_EMAIL,
        seed_admin_password=TEST_PASSWORD,
        seed_admin_name="Owner",
    )
    with TestClient(configure_fastapi_app(config, notifier)) as test_client:
        yield test_client


def _login(client: TestClient, email: str, password: str = TEST_PASSWORD) -> dict[str, str]:
    response = client.post("/auth/login", data={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _add_user(client: TestClient, owner: dict[str, str], email: str, role: str | None) -> str:
    response = client.post(
        "/users",
        json={"email": email, "password": TEST_PASSWORD, "full_name": "Staff", "role": role},
        headers=owner,
    )
    assert response.status_code == 201, response.text
    return response.json()["user_id"]


@pytest.fixture
def owner(client: TestClient) -> dict[str, str]:
    return _login(client, OWNER_EMAIL)


def test_root(client: TestClient) -> None:
    assert client.get("/").json() == "Hans Educational Institute API"


class TestAuth:
    """Test suite for login and account routes."""

    def test_seeded_owner_account(self, client: TestClient, owner: dict[str, str]) -> None:
        account = client.get("/auth/account", headers=owner).json()

        assert account["email"] == OWNER_EMAIL
        assert account["role"] == "super_admin"
        assert account["capabilities"] == {
            "can_edit": True,
            "can_delete": True,
            "can_manage_users": True,
        }

    def test_bad_credentials(self, client: TestClient) -> None:
        response = client.post(
            "/auth/login",
            data={"email": OWNER_EMAIL, "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_missing_and_invalid_token(self, client: TestClient) -> None:
        assert client.get("/auth/account").status_code == 401
        response = client.get("/auth/account", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_change_password(self, client: TestClient, owner: dict[str, str]) -> None:
        response = client.patch(
            "/auth/account/password",
            data={"new_password": "an-even-better-password"},
            headers=owner,
        )

        assert response.status_code == 200
        _login(client, OWNER_EMAIL, "an-even-better-password")

    def test_deactivated_user_token_stops_working(
        self,
        client: TestClient,
        owner: dict[str, str],
    ) -> None:
        user_id = _add_user(client, owner, "office@hans.edu.np", "admin")
        office = _login(client, "office@hans.edu.np")

        client.patch(f"/users/{user_id}/status", json={"is_active": False}, headers=owner)

        assert client.get("/auth/account", headers=office).status_code == 401


class TestContentPermissions:
    """Test suite for role checks on content routes."""

    def test_viewer_can_list_but_not_edit(
        self,
        client: TestClient,
        owner: dict[str, str],
    ) -> None:
        _add_user(client, owner, "viewer@hans.edu.np", "viewer")
        viewer = _login(client, "viewer@hans.edu.np")

        assert client.get("/courses/all", headers=viewer).status_code == 200
        response = client.post("/courses", json=COURSE, headers=viewer)
        assert response.status_code == 403
        assert response.json()["detail"] == "Permission denied: requires edit access"

    def test_admin_can_edit_but_not_delete(
        self,
        client: TestClient,
        owner: dict[str, str],
    ) -> None:
        _add_user(client, owner, "office@hans.edu.np", "admin")
        admin = _login(client, "office@hans.edu.np")

        created = client.post("/courses", json=COURSE, headers=admin)
        assert created.status_code == 201
        course_id = created.json()["id"]

        updated = client.patch(f"/courses/{course_id}", json={"price": "NPR 60,000"}, headers=admin)
        assert updated.status_code == 200
        assert updated.json()["price"] == "NPR 60,000"
        assert updated.json()["title"] == "Science"

        assert client.delete(f"/courses/{course_id}", headers=admin).status_code == 403
        deleted = client.delete(f"/courses/{course_id}", headers=owner)
        assert deleted.status_code == 200
        assert deleted.json() == "Course deleted successfully"
        assert client.delete(f"/courses/{course_id}", headers=owner).status_code == 404

    def test_user_without_role_has_no_admin_access(
        self,
        client: TestClient,
        owner: dict[str, str],
    ) -> None:
        _add_user(client, owner, "student@hans.edu.np", None)
        student = _login(client, "student@hans.edu.np")

        response = client.get("/courses/all", headers=student)

        assert response.status_code == 403
        assert response.json()["detail"] == "You do not have access to the admin panel"

    def test_role_change_applies_to_existing_token(
        self,
        client: TestClient,
        owner: dict[str, str],
    ) -> None:
        user_id = _add_user(client, owner, "office@hans.edu.np", "viewer")
        office = _login(client, "office@hans.edu.np")
        assert client.post("/courses", json=COURSE, headers=office).status_code == 403

        client.put(f"/users/{user_id}/role", json={"role": "admin"}, headers=owner)

        assert client.post("/courses", json=COURSE, headers=office).status_code == 201


class TestPublicContent:
    """Test suite for anonymous content listings."""

    def test_inactive_rows_hidden(self, client: TestClient, owner: dict[str, str]) -> None:
        client.post("/courses", json=COURSE, headers=owner)
        hidden = client.post(
            "/courses",
            json={**COURSE, "title": "Old Course", "is_active": False},
            headers=owner,
        ).json()

        public = [course["title"] for course in client.get("/courses").json()]
        everything = [course["title"] for course in client.get("/courses/all", headers=owner).json()]

        assert public == ["Science"]
        assert sorted(everything) == ["Old Course", "Science"]
        assert client.get(f"/courses/{hidden['id']}").status_code == 404

    def test_notice_popup_feed(self, client: TestClient, owner: dict[str, str]) -> None:
        client.post(
            "/notices",
            json={"title": "Holiday", "content": "Closed on Dashain", "show_as_popup": True},
            headers=owner,
        )
        client.post(
            "/notices",
            json={
                "title": "Exam",
                "content": "Exam postponed",
                "priority": "urgent",
                "show_as_popup": True,
            },
            headers=owner,
        )
        client.post(
            "/notices",
            json={"title": "Results", "content": "Results published", "type": "news"},
            headers=owner,
        )

        popup = client.get("/notices/popup").json()
        news = client.get("/notices", params={"type": "news"}).json()

        assert [notice["title"] for notice in popup] == ["Exam", "Holiday"]
        assert set(popup[0]) == {"id", "title", "content", "priority"}
        assert [notice["title"] for notice in news] == ["Results"]
        assert news[0]["published_bs"] != "Invalid Date"

    def test_founder_and_faculty_routes(self, client: TestClient, owner: dict[str, str]) -> None:
        founder = client.post(
            "/founders",
            json={"name": "Hari", "designation": "Founder", "message": "Welcome"},
            headers=owner,
        )
        faculty = client.post(
            "/faculty",
            json={
                "name": "Shyam",
                "designation": "Lecturer",
                "qualification": "M.Sc.",
                "specialization": "Physics",
            },
            headers=owner,
        )

        assert founder.status_code == 201
        assert faculty.status_code == 201
        assert [row["name"] for row in client.get("/founders").json()] == ["Hari"]
        assert [row["name"] for row in client.get("/faculty").json()] == ["Shyam"]

    def test_unknown_fields_rejected(self, client: TestClient, owner: dict[str, str]) -> None:
        response = client.post("/courses", json={**COURSE, "rating": 5}, headers=owner)

        assert response.status_code == 422


class TestInquiries:
    """Test suite for the contact form and inquiry management."""

    def test_submission_stored_and_admins_alerted(
        self,
        client: TestClient,
        owner: dict[str, str],
        notifier: RecordingNotifier,
    ) -> None:
        response = client.post("/inquiries", json=INQUIRY)

        assert response.status_code == 201
        receipt = response.json()
        assert receipt["success"]
        assert receipt["notified"]
        assert receipt["inquiry"]["subject"] == "General Inquiry"
        assert notifier.sent[0][1] == [OWNER_EMAIL]

        inquiries = client.get("/inquiries", headers=owner).json()
        assert len(inquiries) == 1
        assert not inquiries[0]["is_read"]

    def test_invalid_submission(self, client: TestClient, owner: dict[str, str]) -> None:
        response = client.post("/inquiries", json={**INQUIRY, "name": "R", "email": "nope"})

        assert response.status_code == 422
        assert response.json()["detail"] == {
            "name": "Name must be between 2 and 100 characters",
            "email": "Please enter a valid email address",
        }
        assert client.get("/inquiries", headers=owner).json() == []

    def test_mark_read_and_delete(self, client: TestClient, owner: dict[str, str]) -> None:
        inquiry_id = client.post("/inquiries", json=INQUIRY).json()["inquiry"]["id"]
        client.post("/inquiries", json={**INQUIRY, "name": "Sita Sharma"})

        read = client.patch(f"/inquiries/{inquiry_id}/read", headers=owner)
        unread = client.get("/inquiries", params={"unread_only": True}, headers=owner).json()

        assert read.json()["is_read"]
        assert [inquiry["name"] for inquiry in unread] == ["Sita Sharma"]
        assert client.delete(f"/inquiries/{inquiry_id}", headers=owner).status_code == 200
        assert client.delete(f"/inquiries/{inquiry_id}", headers=owner).status_code == 404

    def test_listing_requires_role(self, client: TestClient) -> None:
        assert client.get("/inquiries").status_code == 401


class TestUserManagement:
    """Test suite for user administration."""

    def test_admin_cannot_manage_users(self, client: TestClient, owner: dict[str, str]) -> None:
        _add_user(client, owner, "office@hans.edu.np", "admin")
        admin = _login(client, "office@hans.edu.np")

        assert client.get("/users", headers=admin).status_code == 403
        assert client.get("/activity", headers=admin).status_code == 403

    def test_cannot_act_on_own_account(self, client: TestClient, owner: dict[str, str]) -> None:
        owner_id = client.get("/auth/account", headers=owner).json()["user_id"]

        assert client.delete(f"/users/{owner_id}", headers=owner).json()["detail"] == (
            "Cannot delete own account"
        )
        assert client.delete(f"/users/{owner_id}/role", headers=owner).status_code == 400
        response = client.patch(
            f"/users/{owner_id}/status",
            json={"is_active": False},
            headers=owner,
        )
        assert response.status_code == 400
        response = client.put(f"/users/{owner_id}/role", json={"role": "viewer"}, headers=owner)
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot change own role"
        assert client.get("/users", headers=owner).status_code == 200

    def test_update_and_remove_role(self, client: TestClient, owner: dict[str, str]) -> None:
        user_id = _add_user(client, owner, "office@hans.edu.np", "admin")

        assert client.patch(f"/users/{user_id}", json={}, headers=owner).status_code == 400
        updated = client.patch(f"/users/{user_id}", json={"full_name": "Front Desk"}, headers=owner)
        removed = client.delete(f"/users/{user_id}/role", headers=owner)

        assert updated.json()["full_name"] == "Front Desk"
        assert removed.json()["role"] is None
        assert client.patch("/users/missing", json={"full_name": "X"}, headers=owner).status_code == 404

    def test_duplicate_email(self, client: TestClient, owner: dict[str, str]) -> None:
        response = client.post(
            "/users",
            json={"email": OWNER_EMAIL, "password": TEST_PASSWORD, "full_name": "Again"},
            headers=owner,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "A user with this email already exists"

    def test_changes_recorded_in_activity_log(
        self,
        client: TestClient,
        owner: dict[str, str],
    ) -> None:
        user_id = _add_user(client, owner, "office@hans.edu.np", "viewer")
        client.put(f"/users/{user_id}/role", json={"role": "admin"}, headers=owner)
        client.post("/courses", json=COURSE, headers=owner)

        actions = {entry["action"] for entry in client.get("/activity", headers=owner).json()}

        assert {"create_user", "set_role", "create_course"} <= actions
