# -*- coding: utf-8 -*-
"""
Integration тесты для API управления пользователями
"""

import pytest
from fastapi.testclient import TestClient

from src.domain.enums import Role
from tests.fixtures import auth_headers

ADMIN = auth_headers("admin-1", Role.ADMIN)
USERS = "/api/v1/users"


def create(client: TestClient, email: str, name: str = "Student", role: str = "user"):
    response = client.post(
        USERS, json={"email": email, "name": name, "role": role}, headers=ADMIN
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def student(client: TestClient):
    return create(client, "student@example.com")


class TestUsersAPI:
    """Integration тесты API пользователей"""

    def test_create_and_list(self, client: TestClient, student):
        """Созданный пользователь появляется в списке"""
        # Arrange
        create(client, "mentor@example.com", name="Mentor", role="mentor")

        # Act
        response = client.get(USERS, headers=ADMIN)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert sorted(u["email"] for u in data["users"]) == [
            "mentor@example.com",
            "student@example.com",
        ]
        assert student["role"] == "user"
        assert student["createdAt"] is not None

        mentors = client.get(USERS, params={"role": "mentor"}, headers=ADMIN).json()
        assert [u["name"] for u in mentors["users"]] == ["Mentor"]

    def test_duplicate_email_conflicts(self, client: TestClient, student):
        response = client.post(
            USERS,
            json={"email": "Student@Example.com", "name": "Again"},
            headers=ADMIN,
        )

        assert response.status_code == 409
        assert response.json()["errorCode"] == "CONFLICT"

    def test_only_admin_manages_users(self, client: TestClient, student):
        for role in (Role.MENTOR, Role.USER):
            headers = auth_headers("someone", role)
            assert client.get(USERS, headers=headers).status_code == 403
            response = client.delete(f"{USERS}/{student['id']}", headers=headers)
            assert response.status_code == 403
        assert client.get(USERS).status_code == 401


class TestRoleUpdate:
    """Смена роли пользователя"""

    def test_admin_changes_role(self, client: TestClient, student):
        response = client.put(
            f"{USERS}/{student['id']}/role", json={"role": "mentor"}, headers=ADMIN
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["user"]["role"] == "mentor"

    def test_admin_cannot_change_own_role(self, client: TestClient):
        response = client.put(
            f"{USERS}/admin-1/role", json={"role": "user"}, headers=ADMIN
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["errorCode"] == "BAD_REQUEST"

    def test_invalid_role_rejected(self, client: TestClient, student):
        response = client.put(
            f"{USERS}/{student['id']}/role", json={"role": "student"}, headers=ADMIN
        )

        assert response.status_code == 422

    def test_unknown_user_is_404(self, client: TestClient):
        response = client.put(f"{USERS}/ghost/role", json={"role": "mentor"}, headers=ADMIN)

        assert response.status_code == 404


class TestUserDelete:
    """Удаление пользователя"""

    def test_delete_removes_user_and_progress(self, client: TestClient, student):
        # Arrange
        user_headers = auth_headers(student["id"])
        response = client.post(
            "/api/v1/progress/toggle",
            json={"userId": student["id"], "problemId": "p1", "completed": True},
            headers=user_headers,
        )
        assert response.status_code == 200

        # Act
        response = client.delete(f"{USERS}/{student['id']}", headers=ADMIN)

        # Assert
        assert response.status_code == 200
        assert response.json()["deletedProgress"] == 1
        assert client.get(USERS, headers=ADMIN).json()["users"] == []
        progress = client.get(f"/api/v1/progress/{student['id']}", headers=ADMIN)
        assert progress.json()["progress"] == []

    def test_admin_cannot_delete_self(self, client: TestClient):
        response = client.delete(f"{USERS}/admin-1", headers=ADMIN)

        assert response.status_code == 400
        assert response.json()["errorCode"] == "BAD_REQUEST"

    def test_delete_unknown_user_is_404(self, client: TestClient):
        assert client.delete(f"{USERS}/ghost", headers=ADMIN).status_code == 404
