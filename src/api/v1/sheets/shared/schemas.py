# -*- coding: utf-8 -*-
"""
Pydantic schemas for Sheet endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from src.api.v1.shared.schemas import CamelModel
from src.domain.enums import Difficulty


def _validate_difficulty(v):
    if v is None:
        return None
    parsed = Difficulty.parse(v)
    if parsed is None:
        raise ValueError(f"Неизвестная сложность: {v}")
    return parsed.value


# ---------------------------------------------------------------------------
# Задачи
# ---------------------------------------------------------------------------


class ProblemLinks(CamelModel):
    practice_link: Optional[str] = None
    platform: Optional[str] = None
    youtube_link: Optional[str] = None
    editorial_link: Optional[str] = None
    notes_link: Optional[str] = None


class ProblemCreateSchema(ProblemLinks):
    """Схема для создания задачи."""

    id: Optional[str] = None
    title: str
    difficulty: str = Difficulty.EASY.value

    @field_validator("difficulty", mode="before")
    @classmethod
    def check_difficulty(cls, v):
        return _validate_difficulty(v) or Difficulty.EASY.value


class ProblemUpdateSchema(ProblemLinks):
    """Схема для обновления задачи (все поля опциональны)."""

    title: Optional[str] = None
    difficulty: Optional[str] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def check_difficulty(cls, v):
        return _validate_difficulty(v)


class ProblemReadSchema(CamelModel):
    """Схема для чтения задачи."""

    id: str
    subsection_id: str
    title: str
    practice_link: str = ""
    platform: str = ""
    youtube_link: str = ""
    editorial_link: str = ""
    notes_link: str = ""
    difficulty: str
    created_at: datetime
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Подразделы и разделы
# ---------------------------------------------------------------------------


class ContainerCreateSchema(CamelModel):
    """Схема для создания раздела или подраздела."""

    id: Optional[str] = None
    name: str
    description: str = ""


class ContainerUpdateSchema(CamelModel):
    """Схема для обновления раздела или подраздела."""

    name: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None


class SubsectionReadSchema(CamelModel):
    id: str
    section_id: str
    name: str
    description: str = ""
    order: int
    problems: List[ProblemReadSchema] = []


class SectionReadSchema(CamelModel):
    id: str
    sheet_id: str
    name: str
    description: str = ""
    order: int
    subsections: List[SubsectionReadSchema] = []


# ---------------------------------------------------------------------------
# Листы
# ---------------------------------------------------------------------------


class SheetCreateSchema(CamelModel):
    """Схема для создания листа."""

    id: Optional[str] = None
    name: str
    description: str = ""


class SheetUpdateSchema(CamelModel):
    """Схема для обновления листа."""

    name: Optional[str] = None
    description: Optional[str] = None


class SheetReadSchema(CamelModel):
    """Схема для чтения листа вместе с содержимым."""

    id: str
    name: str
    description: str = ""
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    sections: List[SectionReadSchema] = []


class DeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted_progress: int = 0
