# -*- coding: utf-8 -*-
"""
Типы хранилища прогресса: идентификаторы, контекст задачи, запись прогресса,
агрегированная статистика и фазы оптимистичной мутации.
"""

from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Mapping, NewType

from src.domain.enums import Difficulty, ProgressFlag

ProblemId = NewType("ProblemId", str)
SheetId = NewType("SheetId", str)
SectionId = NewType("SectionId", str)
SubsectionId = NewType("SubsectionId", str)


def parse_timestamp(value: Any) -> datetime | None:
    """Привести datetime или ISO-строку к aware datetime в UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _pick(record: Mapping[str, Any], camel: str, snake: str) -> Any:
    if camel in record:
        return record[camel]
    return record.get(snake)


def _optional_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class ProblemContext:
    """Положение задачи в иерархии листа на момент действия."""

    sheet_id: SheetId | None = None
    section_id: SectionId | None = None
    subsection_id: SubsectionId | None = None
    difficulty: Difficulty | None = None

    def __post_init__(self):
        # Принимаем и строковое значение сложности ("Easy", "hard")
        object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))

    def to_payload(self) -> dict:
        return {
            "sheetId": self.sheet_id,
            "sectionId": self.section_id,
            "subsectionId": self.subsection_id,
            "difficulty": self.difficulty.value if self.difficulty else None,
        }


@dataclass
class ProgressEntry:
    problem_id: ProblemId
    sheet_id: SheetId | None = None
    section_id: SectionId | None = None
    subsection_id: SubsectionId | None = None
    difficulty: Difficulty | None = None
    completed: bool = False
    completed_at: datetime | None = None
    marked_for_revision: bool = False
    revision_marked_at: datetime | None = None

    def __post_init__(self):
        self.difficulty = Difficulty.parse(self.difficulty)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ProgressEntry | None":
        """
        Построить запись из ответа API.

        Принимает ключи в camelCase (формат API) и snake_case.
        Возвращает None, если у записи нет ``problemId``.
        """
        problem_id = _optional_id(_pick(record, "problemId", "problem_id"))
        if problem_id is None:
            return None
        completed = bool(record.get("completed", False))
        marked = bool(_pick(record, "markedForRevision", "marked_for_revision"))
        return cls(
            problem_id=ProblemId(problem_id),
            sheet_id=_optional_id(_pick(record, "sheetId", "sheet_id")),
            section_id=_optional_id(_pick(record, "sectionId", "section_id")),
            subsection_id=_optional_id(_pick(record, "subsectionId", "subsection_id")),
            difficulty=Difficulty.parse(record.get("difficulty")),
            completed=completed,
            completed_at=(
                parse_timestamp(_pick(record, "completedAt", "completed_at"))
                if completed
                else None
            ),
            marked_for_revision=marked,
            revision_marked_at=(
                parse_timestamp(_pick(record, "revisionMarkedAt", "revision_marked_at"))
                if marked
                else None
            ),
        )

    @property
    def context(self) -> ProblemContext:
        return ProblemContext(
            sheet_id=self.sheet_id,
            section_id=self.section_id,
            subsection_id=self.subsection_id,
            difficulty=self.difficulty,
        )

    @property
    def is_active(self) -> bool:
        """Запись хранится, пока выставлен хотя бы один флаг."""
        return self.completed or self.marked_for_revision

    def flag(self, flag: ProgressFlag) -> bool:
        if flag is ProgressFlag.COMPLETED:
            return self.completed
        return self.marked_for_revision

    def with_context(self, context: ProblemContext) -> "ProgressEntry":
        """Копия записи, в которой заданные поля контекста заменены."""
        return replace(
            self,
            sheet_id=context.sheet_id or self.sheet_id,
            section_id=context.section_id or self.section_id,
            subsection_id=context.subsection_id or self.subsection_id,
            difficulty=context.difficulty or self.difficulty,
        )

    def to_dict(self) -> dict:
        return {
            "problemId": self.problem_id,
            **self.context.to_payload(),
            "completed": self.completed,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            "markedForRevision": self.marked_for_revision,
            "revisionMarkedAt": (
                self.revision_marked_at.isoformat() if self.revision_marked_at else None
            ),
        }


def _difficulty_counter() -> Counter:
    return Counter({difficulty: 0 for difficulty in Difficulty})


@dataclass
class RevisionStats:
    by_sheet: Counter = field(default_factory=Counter)
    by_difficulty: Counter = field(default_factory=_difficulty_counter)


@dataclass
class AggregateStats:
    """Производная статистика; изменяется только хранилищем."""

    total_completed: int = 0
    total_marked_for_revision: int = 0
    sheet_stats: Counter = field(default_factory=Counter)
    section_stats: Counter = field(default_factory=Counter)
    subsection_stats: Counter = field(default_factory=Counter)
    difficulty_stats: Counter = field(default_factory=_difficulty_counter)
    sheet_difficulty_stats: dict = field(default_factory=dict)
    revision_stats: RevisionStats = field(default_factory=RevisionStats)
    recent_activity: list[ProgressEntry] = field(default_factory=list)
    recent_revisions: list[ProgressEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Статистика в формате API (camelCase)."""

        def by_difficulty(counter: Counter) -> dict:
            return {difficulty.value: counter[difficulty] for difficulty in Difficulty}

        return {
            "totalCompleted": self.total_completed,
            "totalMarkedForRevision": self.total_marked_for_revision,
            "sheetStats": dict(self.sheet_stats),
            "sectionStats": dict(self.section_stats),
            "subsectionStats": dict(self.subsection_stats),
            "difficultyStats": by_difficulty(self.difficulty_stats),
            "sheetDifficultyStats": {
                sheet_id: by_difficulty(counter)
                for sheet_id, counter in self.sheet_difficulty_stats.items()
            },
            "revisionStats": {
                "bySheet": dict(self.revision_stats.by_sheet),
                "byDifficulty": by_difficulty(self.revision_stats.by_difficulty),
            },
            "recentActivity": [entry.to_dict() for entry in self.recent_activity],
            "recentRevisions": [entry.to_dict() for entry in self.recent_revisions],
        }


@dataclass(frozen=True)
class ContainerStats:
    completed: int = 0
    marked_for_revision: int = 0


class MutationPhase(str, enum.Enum):
    """
    Фазы оптимистичной мутации.

    PENDING -> COMMITTED, либо PENDING -> REVERTING -> SETTLED.
    """

    PENDING = "pending"
    COMMITTED = "committed"
    REVERTING = "reverting"
    SETTLED = "settled"


@dataclass(eq=False)
class Mutation:
    flag: ProgressFlag
    problem_id: ProblemId
    context: ProblemContext
    target: bool
    phase: MutationPhase = MutationPhase.PENDING

    @property
    def settled(self) -> bool:
        return self.phase in (MutationPhase.COMMITTED, MutationPhase.SETTLED)
