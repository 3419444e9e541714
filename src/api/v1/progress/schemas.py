# -*- coding: utf-8 -*-
"""
Pydantic-схемы для прогресса пользователей.

Формат API — camelCase (как его читает хранилище прогресса на клиенте);
запросы принимают и snake_case.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import field_validator

from src.api.v1.shared.schemas import CamelModel
from src.domain.enums import Difficulty


class ProgressRead(CamelModel):
    id: str
    user_id: str
    problem_id: str
    sheet_id: Optional[str] = None
    section_id: Optional[str] = None
    subsection_id: Optional[str] = None
    difficulty: Optional[str] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    marked_for_revision: bool = False
    revision_marked_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ToggleRequestBase(CamelModel):
    user_id: str
    problem_id: str
    sheet_id: Optional[str] = None
    section_id: Optional[str] = None
    subsection_id: Optional[str] = None
    difficulty: Optional[str] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, v):
        """Неизвестная сложность (старые задачи) сохраняется как None."""
        parsed = Difficulty.parse(v)
        return parsed.value if parsed else None


class ToggleProblemRequest(ToggleRequestBase):
    completed: bool


class ToggleRevisionRequest(ToggleRequestBase):
    marked_for_revision: bool


class ProgressListResponse(CamelModel):
    success: bool = True
    progress: list[ProgressRead]


class ToggleResponse(CamelModel):
    success: bool = True
    progress: Optional[ProgressRead] = None


class StatsResponse(CamelModel):
    success: bool = True
    stats: dict[str, Any]


class RevisionListResponse(CamelModel):
    success: bool = True
    revision_problems: list[ProgressRead]
