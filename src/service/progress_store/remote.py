# -*- coding: utf-8 -*-
"""
Внешние зависимости хранилища прогресса.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.service.progress_store.types import ProblemContext, ProblemId


class IdentityProvider(Protocol):
    """Источник текущего пользователя (None — пользователь не вошел)."""

    def current_user_id(self) -> str | None: ...


class ProgressRemote(Protocol):
    """Удаленный источник истины для прогресса пользователя."""

    async def fetch_progress(self, user_id: str) -> list[dict[str, Any]]: ...

    async def submit_completion(
        self,
        user_id: str,
        problem_id: ProblemId,
        context: ProblemContext,
        completed: bool,
    ) -> bool: ...

    async def submit_revision(
        self,
        user_id: str,
        problem_id: ProblemId,
        context: ProblemContext,
        marked_for_revision: bool,
    ) -> bool: ...

    async def fetch_revision_list(self, user_id: str) -> list[dict[str, Any]]: ...


class StaticIdentity:
    """Простой IdentityProvider с изменяемым пользователем."""

    def __init__(self, user_id: str | None = None):
        self.user_id = user_id

    def current_user_id(self) -> str | None:
        return self.user_id
