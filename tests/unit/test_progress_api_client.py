# -*- coding: utf-8 -*-
"""
Unit тесты для ProgressAPIClient
"""

import json

import httpx
import pytest

from src.clients.progress_api_client import ProgressAPIClient
from src.domain.enums import Difficulty
from tests.fixtures import context, pid, record

BASE_URL = "http://sheettrack.test/api/v1"


def make_client(handler, token="token-123"):
    return ProgressAPIClient(
        base_url=BASE_URL,
        token_provider=lambda: token,
        transport=httpx.MockTransport(handler),
    )


class TestProgressAPIClient:
    """Тесты HTTP-клиента прогресса"""

    @pytest.mark.asyncio
    async def test_fetch_progress_sends_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(
                200, json={"success": True, "progress": [record("p1", completed=True)]}
            )

        async with make_client(handler) as client:
            records = await client.fetch_progress("u1")

        assert seen == {"path": "/api/v1/progress/u1", "auth": "Bearer token-123"}
        assert [r["problemId"] for r in records] == ["p1"]

    @pytest.mark.asyncio
    async def test_fetch_progress_unexpected_shape(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "progress": "broken"})

        async with make_client(handler) as client:
            assert await client.fetch_progress("u1") == []

    @pytest.mark.asyncio
    async def test_submit_completion_payload(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "progress": None})

        async with make_client(handler) as client:
            ok = await client.submit_completion(
                "u1", pid("p1"), context(difficulty=Difficulty.HARD), True
            )

        assert ok is True
        assert captured["path"] == "/api/v1/progress/toggle"
        assert captured["body"] == {
            "userId": "u1",
            "problemId": "p1",
            "sheetId": "s1",
            "sectionId": "sec1",
            "subsectionId": "sub1",
            "difficulty": "Hard",
            "completed": True,
        }

    @pytest.mark.asyncio
    async def test_submit_revision_non_success_body(self):
        def handler(request):
            assert request.url.path == "/api/v1/progress/toggle-revision"
            assert json.loads(request.content)["markedForRevision"] is False
            return httpx.Response(200, json={"success": False})

        async with make_client(handler) as client:
            assert await client.submit_revision("u1", pid("p1"), context(), False) is False

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        def handler(request):
            return httpx.Response(500, json={"detail": "boom"})

        async with make_client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.submit_completion("u1", pid("p1"), context(), True)

    @pytest.mark.asyncio
    async def test_no_token_no_header(self):
        def handler(request):
            assert "Authorization" not in request.headers
            return httpx.Response(200, json={"success": True, "revisionProblems": []})

        async with make_client(handler, token=None) as client:
            assert await client.fetch_revision_list("u1") == []

    @pytest.mark.asyncio
    async def test_store_with_string_difficulty_over_http(self):
        """Строковая сложность в контексте уходит на сервер как значение перечисления"""
        from src.service.progress_store import ProblemContext, ProgressStore, StaticIdentity

        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json={"success": True, "progress": []})
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True, "progress": None})

        async with make_client(handler) as client:
            store = ProgressStore(client, StaticIdentity("u1"))
            await store.load()
            ok = await store.toggle_completion(
                pid("p1"), ProblemContext(sheet_id="s1", difficulty="easy")
            )

        assert ok is True
        assert bodies[0]["difficulty"] == "Easy"
        assert store.is_completed(pid("p1")) is True
        assert store.difficulty_progress(Difficulty.EASY) == 1
