# -*- coding: utf-8 -*-
"""
SheetTrack/src/repository/progress.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Репозиторий прогресса пользователей по задачам.

Строка прогресса живет, пока задача решена или отмечена для повторения:
снятие одного флага не трогает другой, снятие последнего удаляет строку.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.enums import Difficulty, ProgressFlag
from src.domain.models import Progress, utcnow
from src.repository.base import list_items

logger = configure_logger("repository.progress")

_DELETE_FILTERS = ("user_id", "problem_id", "sheet_id", "section_id", "subsection_id")


def progress_id(user_id: str, problem_id: str) -> str:
    return f"{user_id}_{problem_id}"


async def get_user_progress(session: AsyncSession, user_id: str) -> List[Progress]:
    """Все записи прогресса пользователя."""
    rows = await list_items(session, Progress, limit=0, user_id=user_id)
    logger.debug(f"Получено {len(rows)} записей прогресса пользователя {user_id}")
    return rows


async def get_revision_problems(session: AsyncSession, user_id: str) -> List[Progress]:
    """Задачи, отмеченные для повторения, от последних к первым."""
    result = await session.execute(
        select(Progress)
        .where(Progress.user_id == user_id, Progress.marked_for_revision.is_(True))
        .order_by(Progress.revision_marked_at.desc())
    )
    return list(result.scalars().all())


async def set_progress_flag(
    session: AsyncSession,
    user_id: str,
    problem_id: str,
    flag: ProgressFlag,
    value: bool,
    sheet_id: Optional[str] = None,
    section_id: Optional[str] = None,
    subsection_id: Optional[str] = None,
    difficulty: Optional[str] = None,
) -> Optional[Progress]:
    """
    Выставить или снять флаг прогресса задачи.

    Returns:
        Обновленная строка прогресса или None, если строка удалена
        (или не существовала).
    """
    row = await session.get(Progress, progress_id(user_id, problem_id))
    now = utcnow()

    if row is None:
        if not value:
            return None
        row = Progress(
            id=progress_id(user_id, problem_id),
            user_id=user_id,
            problem_id=problem_id,
            completed=False,
            marked_for_revision=False,
        )
        session.add(row)

    if sheet_id:
        row.sheet_id = sheet_id
    if section_id:
        row.section_id = section_id
    if subsection_id:
        row.subsection_id = subsection_id
    parsed = Difficulty.parse(difficulty)
    if parsed is not None:
        row.difficulty = parsed.value

    if flag is ProgressFlag.COMPLETED:
        row.completed = value
        row.completed_at = now if value else None
    else:
        row.marked_for_revision = value
        row.revision_marked_at = now if value else None
    row.updated_at = now

    if not (row.completed or row.marked_for_revision):
        await session.delete(row)
        await session.commit()
        logger.info(f"Удален прогресс {row.id}: флаги сняты")
        return None

    await session.commit()
    logger.info(f"Прогресс {row.id}: {flag.value}={value}")
    return row


async def delete_progress(session: AsyncSession, **filters: str) -> int:
    """
    Удалить строки прогресса по одному из полей
    (user_id, problem_id, sheet_id, section_id, subsection_id).
    """
    unknown = set(filters) - set(_DELETE_FILTERS)
    if unknown or not filters:
        raise ValueError(f"Недопустимые фильтры удаления прогресса: {sorted(filters)}")

    stmt = delete(Progress)
    for key, value in filters.items():
        stmt = stmt.where(getattr(Progress, key) == value)
    result = await session.execute(stmt)
    await session.commit()
    logger.info(f"Удалено {result.rowcount} записей прогресса по {filters}")
    return result.rowcount
