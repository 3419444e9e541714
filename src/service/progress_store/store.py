# -*- coding: utf-8 -*-
"""
Хранилище прогресса пользователя с оптимистичными обновлениями.

Хранилище держит записи прогресса текущего пользователя и производную
статистику. Мутации применяются локально сразу (до первого ``await``),
затем отправляются на сервер; при отказе сервера состояние полностью
перезагружается с сервера.

Блокировок нет: все изменения состояния выполняются в одном event loop.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Callable, Optional

from src.config.logger import configure_logger
from src.config.settings import settings
from src.domain.enums import ContainerKind, Difficulty, ProgressFlag
from src.service.progress_store.aggregation import (contribute, parse_entries,
                                                    recent, refresh_recent,
                                                    upsert_or_prune)
from src.service.progress_store.remote import IdentityProvider, ProgressRemote
from src.service.progress_store.types import (AggregateStats, ContainerStats,
                                              Mutation, MutationPhase,
                                              ProblemContext, ProblemId,
                                              ProgressEntry)

logger = configure_logger("progress_store")

Listener = Callable[["ProgressStore"], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProgressStore:
    """Единый источник состояния прогресса для текущего пользователя."""

    def __init__(
        self,
        remote: ProgressRemote,
        identity: IdentityProvider,
        recent_limit: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._remote = remote
        self._identity = identity
        self._recent_limit = (
            recent_limit if recent_limit is not None else settings.progress_recent_limit
        )
        self._clock = clock

        self._user_id: str | None = None
        self._entries: dict[ProblemId, ProgressEntry] = {}
        self._stats = AggregateStats()
        self._loading = False
        self._in_flight: list[Mutation] = []
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Состояние
    # ------------------------------------------------------------------

    @property
    def user_id(self) -> str | None:
        """Пользователь, для которого загружено текущее состояние."""
        return self._user_id

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def stats(self) -> AggregateStats:
        """Снимок агрегированной статистики."""
        return copy.deepcopy(self._stats)

    @property
    def in_flight(self) -> tuple[Mutation, ...]:
        """Мутации, ответ сервера на которые еще не обработан."""
        return tuple(self._in_flight)

    def entries(self) -> dict[ProblemId, ProgressEntry]:
        """Снимок записей прогресса."""
        return copy.deepcopy(self._entries)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Подписаться на изменения состояния.

        Слушатель вызывается синхронно после каждого изменения (загрузка,
        оптимистичное изменение, ресинхронизация). Возвращает функцию отписки.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Ошибка в подписчике хранилища прогресса")

    def _reset(self, user_id: str | None) -> None:
        self._user_id = user_id
        self._entries = {}
        self._stats = AggregateStats()
        self._notify()

    def _replace(self, user_id: str, entries: dict[ProblemId, ProgressEntry]) -> None:
        stats = AggregateStats()
        for entry in entries.values():
            contribute(stats, entry, +1)
        refresh_recent(stats, entries.values(), self._recent_limit)

        self._user_id = user_id
        self._entries = entries
        self._stats = stats
        self._notify()

    # ------------------------------------------------------------------
    # Загрузка
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """
        Полностью перестроить состояние по данным сервера.

        Без пользователя и при любой ошибке загрузки состояние сбрасывается
        к пустому. Повторных попыток нет.
        """
        user_id = self._identity.current_user_id()
        if not user_id:
            self._reset(None)
            return

        self._loading = True
        try:
            records = await self._remote.fetch_progress(user_id)
        except Exception as e:
            logger.error(f"Ошибка загрузки прогресса пользователя {user_id}: {e}")
            self._loading = False
            self._reset(user_id)
            return
        self._loading = False

        if not isinstance(records, list):
            logger.warning(
                f"Неожиданный формат прогресса пользователя {user_id}: "
                f"{type(records).__name__}, считаем прогресс пустым"
            )
        entries = parse_entries(records)
        self._replace(user_id, entries)
        logger.debug(
            f"Загружен прогресс пользователя {user_id}: {len(entries)} записей"
        )

    async def refresh(self) -> None:
        """Ручная перезагрузка (то же, что ``load``)."""
        await self.load()

    async def sync_identity(self) -> bool:
        """
        Перезагрузить состояние, если сменился пользователь (вход/выход).

        Returns:
            True, если загрузка выполнялась.
        """
        if self._identity.current_user_id() == self._user_id:
            return False
        await self.load()
        return True

    # ------------------------------------------------------------------
    # Мутации
    # ------------------------------------------------------------------

    async def toggle_completion(
        self,
        problem_id: ProblemId,
        context: ProblemContext,
        desired_state: Optional[bool] = None,
    ) -> bool:
        """Отметить задачу решенной/нерешенной (без desired_state — инвертировать)."""
        return await self._toggle(
            ProgressFlag.COMPLETED, problem_id, context, desired_state
        )

    async def toggle_revision(
        self,
        problem_id: ProblemId,
        context: ProblemContext,
        desired_state: Optional[bool] = None,
    ) -> bool:
        """Поставить/снять отметку «повторить»."""
        return await self._toggle(
            ProgressFlag.MARKED_FOR_REVISION, problem_id, context, desired_state
        )

    async def _toggle(
        self,
        flag: ProgressFlag,
        problem_id: ProblemId,
        context: ProblemContext,
        desired_state: Optional[bool],
    ) -> bool:
        user_id = self._identity.current_user_id()
        if not user_id:
            logger.warning(f"Изменение {flag.value} для {problem_id} без пользователя")
            return False

        current = self._flag_value(problem_id, flag)
        target = (not current) if desired_state is None else bool(desired_state)
        mutation = Mutation(
            flag=flag, problem_id=problem_id, context=context, target=target
        )

        # Фаза 1: локальное применение, до первого await
        self._apply(mutation)
        self._in_flight.append(mutation)
        self._notify()

        # Фаза 2: подтверждение сервером
        try:
            if flag is ProgressFlag.COMPLETED:
                accepted = await self._remote.submit_completion(
                    user_id, problem_id, context, target
                )
            else:
                accepted = await self._remote.submit_revision(
                    user_id, problem_id, context, target
                )
        except Exception as e:
            logger.error(
                f"Ошибка отправки {flag.value}={target} для {problem_id}: {e}"
            )
            accepted = False

        if accepted:
            mutation.phase = MutationPhase.COMMITTED
            self._in_flight.remove(mutation)
            return True

        logger.warning(
            f"Сервер отклонил {flag.value}={target} для {problem_id}, "
            f"перезагружаем прогресс"
        )
        mutation.phase = MutationPhase.REVERTING
        try:
            await self.load()
        finally:
            mutation.phase = MutationPhase.SETTLED
            self._in_flight.remove(mutation)
        return False

    def _apply(self, mutation: Mutation) -> None:
        old = self._entries.get(mutation.problem_id)
        new = upsert_or_prune(
            old,
            mutation.problem_id,
            mutation.context,
            mutation.flag,
            mutation.target,
            self._clock(),
        )
        if old is not None:
            contribute(self._stats, old, -1)
        if new is None:
            self._entries.pop(mutation.problem_id, None)
        else:
            self._entries[mutation.problem_id] = new
            contribute(self._stats, new, +1)
        refresh_recent(self._stats, self._entries.values(), self._recent_limit)

    def _flag_value(self, problem_id: ProblemId, flag: ProgressFlag) -> bool:
        entry = self._entries.get(problem_id)
        return entry.flag(flag) if entry is not None else False

    # ------------------------------------------------------------------
    # Запросы
    # ------------------------------------------------------------------

    def is_completed(self, problem_id: ProblemId) -> bool:
        return self._flag_value(problem_id, ProgressFlag.COMPLETED)

    def is_marked_for_revision(self, problem_id: ProblemId) -> bool:
        return self._flag_value(problem_id, ProgressFlag.MARKED_FOR_REVISION)

    def get_entry(self, problem_id: ProblemId) -> ProgressEntry | None:
        entry = self._entries.get(problem_id)
        return copy.copy(entry) if entry is not None else None

    def stats_for(self, container_id: str, kind: ContainerKind | str) -> ContainerStats:
        """Число решенных и отмеченных для повторения задач в контейнере."""
        try:
            kind = ContainerKind(kind)
        except ValueError:
            logger.warning(f"Неизвестный тип контейнера: {kind}")
            return ContainerStats()

        if kind is ContainerKind.SHEET:
            return ContainerStats(
                completed=self._stats.sheet_stats[container_id],
                marked_for_revision=self._stats.revision_stats.by_sheet[container_id],
            )

        attr = "section_id" if kind is ContainerKind.SECTION else "subsection_id"
        counter = (
            self._stats.section_stats
            if kind is ContainerKind.SECTION
            else self._stats.subsection_stats
        )
        marked = sum(
            1
            for entry in self._entries.values()
            if entry.marked_for_revision and getattr(entry, attr) == container_id
        )
        return ContainerStats(
            completed=counter[container_id], marked_for_revision=marked
        )

    def difficulty_progress(self, difficulty: Difficulty | str) -> int:
        """Число решенных задач данной сложности по всем листам."""
        parsed = Difficulty.parse(difficulty)
        if parsed is None:
            return 0
        return self._stats.difficulty_stats[parsed]

    def sheet_difficulty_progress(
        self, sheet_id: str, difficulty: Difficulty | str
    ) -> int:
        """Число решенных задач данной сложности в одном листе."""
        parsed = Difficulty.parse(difficulty)
        counter = self._stats.sheet_difficulty_stats.get(sheet_id)
        if parsed is None or counter is None:
            return 0
        return counter[parsed]

    def revision_difficulty_progress(self, difficulty: Difficulty | str) -> int:
        """Число задач данной сложности, отмеченных для повторения."""
        parsed = Difficulty.parse(difficulty)
        if parsed is None:
            return 0
        return self._stats.revision_stats.by_difficulty[parsed]

    async def revision_list(self) -> list[ProgressEntry]:
        """
        Задачи, отмеченные для повторения, по данным сервера.

        Никогда не бросает исключение: при ошибке возвращает пустой список.
        """
        user_id = self._identity.current_user_id()
        if not user_id:
            return []
        try:
            records = await self._remote.fetch_revision_list(user_id)
        except Exception as e:
            logger.error(f"Ошибка получения списка повторения {user_id}: {e}")
            return []
        entries = parse_entries(records).values()
        return recent(entries, ProgressFlag.MARKED_FOR_REVISION, limit=len(entries))
