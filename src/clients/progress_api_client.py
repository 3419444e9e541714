# -*- coding: utf-8 -*-
"""
HTTP-клиент API прогресса на httpx.

Реализует протокол ``ProgressRemote`` для хранилища прогресса. HTTP-ошибки
не перехватываются: их обрабатывает хранилище (ресинхронизация).
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx

from src.config.logger import configure_logger
from src.config.settings import settings
from src.service.progress_store.aggregation import extract_records
from src.service.progress_store.types import ProblemContext, ProblemId

logger = configure_logger("progress_api_client")

TokenProvider = Callable[[], Optional[str]]


class ProgressAPIClient:
    """Клиент эндпоинтов ``/progress`` сервера SheetTrack."""

    def __init__(
        self,
        base_url: str | None = None,
        token_provider: TokenProvider | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.progress_api_base_url,
            timeout=timeout if timeout is not None else settings.progress_api_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ProgressAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        token = self._token_provider() if self._token_provider else None
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def _get(self, path: str) -> Any:
        response = await self._client.get(path, headers=self._headers())
        response.raise_for_status()
        return response.json()

    async def _post(self, path: str, payload: dict) -> Any:
        response = await self._client.post(path, json=payload, headers=self._headers())
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _is_success(body: Any) -> bool:
        return isinstance(body, dict) and body.get("success") is True

    async def fetch_progress(self, user_id: str) -> list[dict[str, Any]]:
        body = await self._get(f"/progress/{user_id}")
        records = extract_records(body, "progress")
        logger.debug(f"Получено {len(records)} записей прогресса для {user_id}")
        return records

    async def submit_completion(
        self,
        user_id: str,
        problem_id: ProblemId,
        context: ProblemContext,
        completed: bool,
    ) -> bool:
        payload = {
            "userId": user_id,
            "problemId": problem_id,
            **context.to_payload(),
            "completed": completed,
        }
        return self._is_success(await self._post("/progress/toggle", payload))

    async def submit_revision(
        self,
        user_id: str,
        problem_id: ProblemId,
        context: ProblemContext,
        marked_for_revision: bool,
    ) -> bool:
        payload = {
            "userId": user_id,
            "problemId": problem_id,
            **context.to_payload(),
            "markedForRevision": marked_for_revision,
        }
        return self._is_success(await self._post("/progress/toggle-revision", payload))

    async def fetch_revision_list(self, user_id: str) -> list[dict[str, Any]]:
        body = await self._get(f"/progress/revision/{user_id}")
        return extract_records(body, "revisionProblems")
