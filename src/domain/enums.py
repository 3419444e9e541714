# -*- coding: utf-8 -*-
"""
SheetTrack/src/domain/enums.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Определение классов перечислений для домена SheetTrack.

Роли пользователей, уровни сложности задач и флаги прогресса.
"""

import enum


class Role(str, enum.Enum):
    """Роли, доступные в системе."""

    ADMIN = "admin"
    MENTOR = "mentor"  # Может править только разборы и заметки задач
    USER = "user"


class Difficulty(str, enum.Enum):
    """Уровни сложности задачи."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value) -> "Difficulty | None":
        """Вернуть сложность или None для неизвестных (устаревших) значений."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().capitalize())
        except ValueError:
            return None


class ProgressFlag(str, enum.Enum):
    """Флаги, которые пользователь может выставить задаче."""

    COMPLETED = "completed"
    MARKED_FOR_REVISION = "marked_for_revision"


class ContainerKind(str, enum.Enum):
    """Уровни иерархии листа."""

    SHEET = "sheet"
    SECTION = "section"
    SUBSECTION = "subsection"
