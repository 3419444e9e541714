# -*- coding: utf-8 -*-
"""
Агрегация прогресса: свертка записей в счетчики по листам, разделам,
подразделам и сложности.

Одни и те же функции используются при полной загрузке, при оптимистичных
изменениях в хранилище и при расчете статистики на сервере, поэтому
агрегаты всегда совпадают с пересчетом с нуля.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from src.domain.enums import Difficulty, ProgressFlag
from src.service.progress_store.types import (AggregateStats, ProblemContext,
                                              ProblemId, ProgressEntry)

DEFAULT_RECENT_LIMIT = 10

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _adjust(counter: Counter, key: Any, delta: int) -> None:
    if key is None:
        return
    counter[key] = max(0, counter[key] + delta)


def _adjust_sheet_difficulty(
    stats: AggregateStats, entry: ProgressEntry, delta: int
) -> None:
    """Счетчик сложности внутри листа; лист без решенных задач удаляется."""
    if entry.sheet_id is None or entry.difficulty is None:
        return
    counter = stats.sheet_difficulty_stats.setdefault(
        entry.sheet_id, Counter({difficulty: 0 for difficulty in Difficulty})
    )
    _adjust(counter, entry.difficulty, delta)
    if not +counter:
        del stats.sheet_difficulty_stats[entry.sheet_id]


def contribute(stats: AggregateStats, entry: ProgressEntry, sign: int) -> None:
    """
    Добавить (sign=+1) или убрать (sign=-1) вклад записи в счетчики.

    Счетчики не опускаются ниже нуля.
    """
    if entry.completed:
        stats.total_completed = max(0, stats.total_completed + sign)
        _adjust(stats.sheet_stats, entry.sheet_id, sign)
        _adjust(stats.section_stats, entry.section_id, sign)
        _adjust(stats.subsection_stats, entry.subsection_id, sign)
        _adjust(stats.difficulty_stats, entry.difficulty, sign)
        _adjust_sheet_difficulty(stats, entry, sign)
    if entry.marked_for_revision:
        stats.total_marked_for_revision = max(
            0, stats.total_marked_for_revision + sign
        )
        _adjust(stats.revision_stats.by_sheet, entry.sheet_id, sign)
        _adjust(stats.revision_stats.by_difficulty, entry.difficulty, sign)


def recent(
    entries: Iterable[ProgressEntry],
    flag: ProgressFlag,
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[ProgressEntry]:
    """Последние `limit` записей с флагом, по убыванию времени."""
    attr = (
        "completed_at" if flag is ProgressFlag.COMPLETED else "revision_marked_at"
    )
    selected = [entry for entry in entries if entry.flag(flag)]
    selected.sort(key=lambda entry: getattr(entry, attr) or _EPOCH, reverse=True)
    return selected[:limit]


def refresh_recent(
    stats: AggregateStats,
    entries: Iterable[ProgressEntry],
    limit: int = DEFAULT_RECENT_LIMIT,
) -> None:
    entries = list(entries)
    stats.recent_activity = recent(entries, ProgressFlag.COMPLETED, limit)
    stats.recent_revisions = recent(entries, ProgressFlag.MARKED_FOR_REVISION, limit)


def build_stats(
    entries: Iterable[ProgressEntry], limit: int = DEFAULT_RECENT_LIMIT
) -> AggregateStats:
    """Пересчитать статистику с нуля за один проход."""
    entries = list(entries)
    stats = AggregateStats()
    for entry in entries:
        contribute(stats, entry, +1)
    refresh_recent(stats, entries, limit)
    return stats


def parse_entries(records: Any) -> dict[ProblemId, ProgressEntry]:
    """
    Разобрать список записей API в словарь problem_id -> запись.

    Нераспознанная форма ответа дает пустой прогресс; записи без
    ``problemId`` и без выставленных флагов пропускаются.
    """
    entries: dict[ProblemId, ProgressEntry] = {}
    if not isinstance(records, list):
        return entries
    for record in records:
        if not isinstance(record, dict):
            continue
        entry = ProgressEntry.from_record(record)
        if entry is None or not entry.is_active:
            continue
        entries[entry.problem_id] = entry
    return entries


def extract_records(payload: Any, key: str) -> list[dict]:
    """
    Достать список записей из ответа API.

    Поддерживаются формы ``{key: [...]}``, ``{"data": [...]}`` и голый список.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for candidate in (key, "data"):
            value = payload.get(candidate)
            if isinstance(value, list):
                return value
    return []


def upsert_or_prune(
    existing: Optional[ProgressEntry],
    problem_id: ProblemId,
    context: ProblemContext,
    flag: ProgressFlag,
    value: bool,
    now: datetime,
) -> Optional[ProgressEntry]:
    """
    Применить изменение одного флага к записи.

    Другой флаг сохраняется как есть. Если после изменения оба флага сняты,
    возвращается None и запись должна быть удалена.
    """
    base = existing if existing is not None else ProgressEntry(problem_id=problem_id)
    entry = base.with_context(context)
    if flag is ProgressFlag.COMPLETED:
        entry.completed = value
        entry.completed_at = now if value else None
    else:
        entry.marked_for_revision = value
        entry.revision_marked_at = now if value else None
    return entry if entry.is_active else None
