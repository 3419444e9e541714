# -*- coding: utf-8 -*-
"""
Фикстуры для тестирования хранилища прогресса и API
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from src.domain.enums import Difficulty, ProgressFlag, Role
from src.security.security import create_access_token
from src.service.progress_store import (ProblemContext, ProblemId,
                                        ProgressStore, StaticIdentity)
from src.service.progress_store.aggregation import upsert_or_prune
from src.service.progress_store.types import ProgressEntry

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    """Часы, которые сдвигаются на секунду при каждом вызове"""

    def __init__(self, start: datetime = BASE_TIME):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class FakeRemote:
    """
    Сервер прогресса в памяти.

    Применяет подтвержденные изменения к своей «истине» по тем же правилам,
    что и настоящий сервер. ``accept=False`` заставляет отклонять мутации,
    ``fail_with`` — бросать исключение.
    """

    def __init__(self, records: Optional[list[dict]] = None):
        self.records: dict[str, dict] = {
            record["problemId"]: record for record in (records or [])
        }
        self.accept = True
        self.fail_with: Optional[Exception] = None
        self.fetch_payload: Any = None
        self.fetch_calls = 0
        self.submitted: list[tuple] = []

    async def fetch_progress(self, user_id: str) -> Any:
        self.fetch_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        if self.fetch_payload is not None:
            return self.fetch_payload
        return [dict(record) for record in self.records.values()]

    async def submit_completion(self, user_id, problem_id, context, completed):
        return self._submit(ProgressFlag.COMPLETED, problem_id, context, completed)

    async def submit_revision(self, user_id, problem_id, context, marked):
        return self._submit(ProgressFlag.MARKED_FOR_REVISION, problem_id, context, marked)

    async def fetch_revision_list(self, user_id: str) -> Any:
        if self.fail_with is not None:
            raise self.fail_with
        return [
            dict(record)
            for record in self.records.values()
            if record.get("markedForRevision")
        ]

    def _submit(self, flag, problem_id, context, value) -> bool:
        self.submitted.append((flag, problem_id, value))
        if self.fail_with is not None:
            raise self.fail_with
        if not self.accept:
            return False
        existing = self.records.get(problem_id)
        entry = upsert_or_prune(
            ProgressEntry.from_record(existing) if existing else None,
            problem_id,
            context,
            flag,
            value,
            BASE_TIME,
        )
        if entry is None:
            self.records.pop(problem_id, None)
        else:
            self.records[problem_id] = entry.to_dict()
        return True


def record(
    problem_id: str,
    sheet_id: str = "s1",
    section_id: str = "sec1",
    subsection_id: str = "sub1",
    difficulty: Optional[str] = Difficulty.EASY.value,
    completed: bool = False,
    marked_for_revision: bool = False,
    completed_at: str = "2024-01-01T00:00:00Z",
    revision_marked_at: str = "2024-01-01T00:00:00Z",
) -> dict:
    """Запись прогресса в формате API"""
    return {
        "problemId": problem_id,
        "sheetId": sheet_id,
        "sectionId": section_id,
        "subsectionId": subsection_id,
        "difficulty": difficulty,
        "completed": completed,
        "completedAt": completed_at if completed else None,
        "markedForRevision": marked_for_revision,
        "revisionMarkedAt": revision_marked_at if marked_for_revision else None,
    }


def context(
    sheet_id: str = "s1",
    section_id: str = "sec1",
    subsection_id: str = "sub1",
    difficulty: Optional[Difficulty] = Difficulty.EASY,
) -> ProblemContext:
    return ProblemContext(
        sheet_id=sheet_id,
        section_id=section_id,
        subsection_id=subsection_id,
        difficulty=difficulty,
    )


def make_store(
    remote: FakeRemote, user_id: Optional[str] = "u1"
) -> tuple[ProgressStore, StaticIdentity]:
    identity = StaticIdentity(user_id)
    store = ProgressStore(remote, identity, recent_limit=10, clock=FakeClock())
    return store, identity


def pid(value: str) -> ProblemId:
    return ProblemId(value)


def auth_headers(user_id: str, role: Role = Role.USER) -> dict[str, str]:
    """Заголовок Authorization с access-токеном пользователя"""
    token = create_access_token({"sub": user_id, "role": role.value})
    return {"Authorization": f"Bearer {token}"}
