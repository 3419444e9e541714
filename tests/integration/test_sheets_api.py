# -*- coding: utf-8 -*-
"""
Integration тесты для API листов задач
"""

import pytest
from fastapi.testclient import TestClient

from src.domain.enums import Role
from tests.fixtures import auth_headers

ADMIN = auth_headers("admin-1", Role.ADMIN)
MENTOR = auth_headers("mentor-1", Role.MENTOR)
USER = auth_headers("u1", Role.USER)

SHEETS = "/api/v1/sheets"
PROBLEMS = f"{SHEETS}/s1/sections/sec1/subsections/sub1/problems"


@pytest.fixture
def sheet(client: TestClient):
    """Лист s1 -> раздел sec1 -> подраздел sub1 -> задача p1"""
    assert client.post(
        SHEETS, json={"id": "s1", "name": "Striver A2Z"}, headers=ADMIN
    ).status_code == 201
    assert client.post(
        f"{SHEETS}/s1/sections", json={"id": "sec1", "name": "Arrays"}, headers=ADMIN
    ).status_code == 201
    assert client.post(
        f"{SHEETS}/s1/sections/sec1/subsections",
        json={"id": "sub1", "name": "Easy arrays"},
        headers=ADMIN,
    ).status_code == 201
    response = client.post(
        PROBLEMS,
        json={
            "id": "p1",
            "title": "Two Sum",
            "difficulty": "Easy",
            "practiceLink": "https://leetcode.com/problems/two-sum/",
            "platform": "leetcode",
        },
        headers=ADMIN,
    )
    assert response.status_code == 201
    return response.json()


class TestSheetsAPI:
    """Integration тесты API листов"""

    def test_public_read_of_nested_sheet(self, client: TestClient, sheet):
        """Лист читается без токена вместе со всей иерархией"""
        response = client.get(f"{SHEETS}/s1")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Striver A2Z"
        assert data["createdBy"] == "admin-1"
        [section] = data["sections"]
        [subsection] = section["subsections"]
        [problem] = subsection["problems"]
        assert problem["title"] == "Two Sum"
        assert problem["practiceLink"] == "https://leetcode.com/problems/two-sum/"
        assert problem["editorialLink"] == ""

        listing = client.get(SHEETS)
        assert [s["id"] for s in listing.json()] == ["s1"]

    def test_children_get_sequential_order(self, client: TestClient, sheet):
        response = client.post(
            f"{SHEETS}/s1/sections", json={"name": "Strings"}, headers=ADMIN
        )

        assert response.status_code == 201
        assert response.json()["order"] == 1
        assert response.json()["id"]

    def test_only_admin_manages_sheets(self, client: TestClient):
        for headers in (MENTOR, USER):
            response = client.post(SHEETS, json={"name": "Mine"}, headers=headers)
            assert response.status_code == 403
        assert client.post(SHEETS, json={"name": "Mine"}).status_code == 401

    def test_duplicate_sheet_id_conflicts(self, client: TestClient, sheet):
        response = client.post(SHEETS, json={"id": "s1", "name": "Again"}, headers=ADMIN)

        assert response.status_code == 409
        assert response.json()["errorCode"] == "CONFLICT"

    def test_missing_sheet_is_404(self, client: TestClient):
        assert client.get(f"{SHEETS}/nope").status_code == 404

    def test_wrong_parent_chain_is_404(self, client: TestClient, sheet):
        """Задачу нельзя изменить через чужой путь"""
        client.post(SHEETS, json={"id": "s2", "name": "Other"}, headers=ADMIN)

        response = client.put(
            f"{SHEETS}/s2/sections/sec1/subsections/sub1/problems/p1",
            json={"title": "Hijacked"},
            headers=ADMIN,
        )

        assert response.status_code == 404

    def test_update_sheet_and_section(self, client: TestClient, sheet):
        response = client.put(
            f"{SHEETS}/s1", json={"description": "Все темы"}, headers=ADMIN
        )
        assert response.status_code == 200
        assert response.json()["description"] == "Все темы"
        assert response.json()["name"] == "Striver A2Z"

        response = client.put(
            f"{SHEETS}/s1/sections/sec1", json={"name": "Arrays I"}, headers=ADMIN
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Arrays I"

    def test_invalid_difficulty_rejected(self, client: TestClient, sheet):
        response = client.post(
            PROBLEMS, json={"title": "Bad", "difficulty": "Impossible"}, headers=ADMIN
        )

        assert response.status_code == 422


class TestMentorEditing:
    """Ментор правит только разборы и заметки"""

    def test_mentor_patch_editorial(self, client: TestClient, sheet):
        response = client.patch(
            f"{PROBLEMS}/p1",
            json={"editorialLink": "https://takeuforward.org/two-sum"},
            headers=MENTOR,
        )

        assert response.status_code == 200
        assert response.json()["editorialLink"] == "https://takeuforward.org/two-sum"
        assert response.json()["title"] == "Two Sum"

    def test_mentor_patch_other_fields_forbidden(self, client: TestClient, sheet):
        response = client.patch(
            f"{PROBLEMS}/p1",
            json={"title": "Three Sum", "notesLink": "https://notes"},
            headers=MENTOR,
        )

        assert response.status_code == 403
        problem = client.get(f"{SHEETS}/s1").json()["sections"][0]["subsections"][0]["problems"][0]
        assert problem["title"] == "Two Sum"
        assert problem["notesLink"] == ""

    def test_mentor_put_is_narrowed(self, client: TestClient, sheet):
        response = client.put(
            f"{PROBLEMS}/p1",
            json={"title": "Renamed", "difficulty": "Hard", "notesLink": "https://notes"},
            headers=MENTOR,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Two Sum"
        assert data["difficulty"] == "Easy"
        assert data["notesLink"] == "https://notes"

    def test_admin_put_updates_everything(self, client: TestClient, sheet):
        response = client.put(
            f"{PROBLEMS}/p1",
            json={"title": "Renamed", "difficulty": "hard"},
            headers=ADMIN,
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["difficulty"] == "Hard"

    def test_user_cannot_edit(self, client: TestClient, sheet):
        response = client.patch(
            f"{PROBLEMS}/p1", json={"notesLink": "https://notes"}, headers=USER
        )

        assert response.status_code == 403

    def test_mentor_cannot_delete(self, client: TestClient, sheet):
        assert client.delete(f"{PROBLEMS}/p1", headers=MENTOR).status_code == 403


class TestCascadeDelete:
    """Удаление элементов листа удаляет прогресс"""

    def _complete(self, client: TestClient, problem_id: str, sheet_id="s1"):
        response = client.post(
            "/api/v1/progress/toggle",
            json={
                "userId": "u1",
                "problemId": problem_id,
                "sheetId": sheet_id,
                "sectionId": "sec1",
                "subsectionId": "sub1",
                "difficulty": "Easy",
                "completed": True,
            },
            headers=USER,
        )
        assert response.status_code == 200

    def _progress_ids(self, client: TestClient):
        rows = client.get("/api/v1/progress/u1", headers=USER).json()["progress"]
        return sorted(row["problemId"] for row in rows)

    def test_delete_problem_removes_its_progress(self, client: TestClient, sheet):
        self._complete(client, "p1")
        self._complete(client, "other", sheet_id="s9")

        response = client.delete(f"{PROBLEMS}/p1", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["deletedProgress"] == 1
        assert self._progress_ids(client) == ["other"]

    def test_delete_sheet_removes_content_and_progress(self, client: TestClient, sheet):
        self._complete(client, "p1")

        response = client.delete(f"{SHEETS}/s1", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["deletedProgress"] == 1
        assert client.get(f"{SHEETS}/s1").status_code == 404
        assert self._progress_ids(client) == []

    def test_delete_subsection(self, client: TestClient, sheet):
        self._complete(client, "p1")

        response = client.delete(
            f"{SHEETS}/s1/sections/sec1/subsections/sub1", headers=ADMIN
        )

        assert response.status_code == 200
        assert response.json()["deletedProgress"] == 1
        sections = client.get(f"{SHEETS}/s1").json()["sections"]
        assert sections[0]["subsections"] == []
