# -*- coding: utf-8 -*-
"""
E2E тест: хранилище прогресса синхронизируется с настоящим API
"""

import httpx
import pytest

from src.clients.progress_api_client import ProgressAPIClient
from src.domain.enums import ContainerKind, Difficulty
from src.security.security import create_access_token
from src.service.progress_store import (ProblemContext, ProgressStore,
                                        StaticIdentity, build_stats)
from tests.fixtures import pid

CTX = ProblemContext(
    sheet_id="s1", section_id="sec1", subsection_id="sub1", difficulty=Difficulty.MEDIUM
)


def make_api_client(app, user_id="u1"):
    token = create_access_token({"sub": user_id, "role": "user"})
    return ProgressAPIClient(
        base_url="http://testserver/api/v1",
        token_provider=lambda: token,
        transport=httpx.ASGITransport(app=app),
    )


class TestProgressSyncFlow:
    """Полный цикл: вход, отметки, повторение, перезагрузка"""

    @pytest.mark.asyncio
    async def test_store_matches_server_after_mutations(self, test_app):
        async with make_api_client(test_app) as api:
            identity = StaticIdentity("u1")
            store = ProgressStore(api, identity)
            await store.load()
            assert store.entries() == {}

            assert await store.toggle_completion(pid("p1"), CTX) is True
            assert await store.toggle_completion(pid("p2"), CTX) is True
            assert await store.toggle_revision(pid("p2"), CTX) is True
            assert await store.toggle_completion(pid("p2"), CTX) is True

            assert store.stats_for("s1", ContainerKind.SHEET).completed == 1
            assert store.difficulty_progress("Medium") == 1
            assert store.revision_difficulty_progress("Medium") == 1

            fresh = ProgressStore(api, identity)
            await fresh.load()
            stats = build_stats(fresh.entries().values())
            assert stats.total_completed == store.stats.total_completed
            assert stats.sheet_stats == store.stats.sheet_stats
            assert stats.revision_stats == store.stats.revision_stats

            revision = await store.revision_list()
            assert [entry.problem_id for entry in revision] == ["p2"]

    @pytest.mark.asyncio
    async def test_forbidden_write_resyncs(self, test_app):
        """Сервер отклоняет запись чужого прогресса, хранилище откатывается"""
        async with make_api_client(test_app, user_id="someone-else") as api:
            store = ProgressStore(api, StaticIdentity("u1"))

            result = await store.toggle_completion(pid("p1"), CTX)

            assert result is False
            assert store.is_completed(pid("p1")) is False
            assert store.entries() == {}
