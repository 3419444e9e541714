# -*- coding: utf-8 -*-
"""
Содержимое листа: разделы, подразделы и задачи.

Каждая операция проверяет всю цепочку родителей (лист -> раздел ->
подраздел), чтобы нельзя было изменить элемент через чужой путь.
Удаление элемента удаляет и прогресс пользователей, который на него ссылается.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.enums import Difficulty
from src.domain.models import Problem, Section, Subsection, generate_id
from src.repository.base import (create_item, delete_item, get_item,
                                 item_exists, update_item)
from src.repository.progress import delete_progress
from src.repository.sheets.base import get_sheet
from src.utils.exceptions import ConflictError, NotFoundError, ValidationError

logger = configure_logger("repository.sheets")


def _updates(fields: dict) -> dict:
    return {key: value for key, value in fields.items() if value is not None}


async def _ensure_free_id(session: AsyncSession, model, item_id: str) -> None:
    if await item_exists(session, model, item_id):
        raise ConflictError(f"{model.__name__} с ID {item_id} уже существует")


# ---------------------------------------------------------------------------
# Поиск по цепочке родителей
# ---------------------------------------------------------------------------


async def get_section(session: AsyncSession, sheet_id: str, section_id: str) -> Section:
    section = await get_item(session, Section, section_id)
    if section.sheet_id != sheet_id:
        raise NotFoundError("Section", section_id, f"нет в листе {sheet_id}")
    return section


async def get_subsection(
    session: AsyncSession, sheet_id: str, section_id: str, subsection_id: str
) -> Subsection:
    await get_section(session, sheet_id, section_id)
    subsection = await get_item(session, Subsection, subsection_id)
    if subsection.section_id != section_id:
        raise NotFoundError("Subsection", subsection_id, f"нет в разделе {section_id}")
    return subsection


async def get_problem(
    session: AsyncSession,
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    problem_id: str,
) -> Problem:
    await get_subsection(session, sheet_id, section_id, subsection_id)
    problem = await get_item(session, Problem, problem_id)
    if problem.subsection_id != subsection_id:
        raise NotFoundError("Problem", problem_id, f"нет в подразделе {subsection_id}")
    return problem


# ---------------------------------------------------------------------------
# Разделы
# ---------------------------------------------------------------------------


async def add_section(
    session: AsyncSession,
    sheet_id: str,
    name: str,
    description: str = "",
    section_id: Optional[str] = None,
) -> Section:
    sheet = await get_sheet(session, sheet_id)
    section_id = section_id or generate_id()
    await _ensure_free_id(session, Section, section_id)

    section = await create_item(
        session,
        Section,
        id=section_id,
        sheet_id=sheet_id,
        name=name,
        description=description,
        order=len(sheet.sections),
    )
    logger.info(f"Добавлен раздел {section.id} в лист {sheet_id}")
    return section


async def update_section(
    session: AsyncSession, sheet_id: str, section_id: str, **fields
) -> Section:
    await get_section(session, sheet_id, section_id)
    return await update_item(session, Section, section_id, **_updates(fields))


async def delete_section(session: AsyncSession, sheet_id: str, section_id: str) -> int:
    await get_section(session, sheet_id, section_id)
    await delete_item(session, Section, section_id)
    return await delete_progress(session, section_id=section_id)


# ---------------------------------------------------------------------------
# Подразделы
# ---------------------------------------------------------------------------


async def add_subsection(
    session: AsyncSession,
    sheet_id: str,
    section_id: str,
    name: str,
    description: str = "",
    subsection_id: Optional[str] = None,
) -> Subsection:
    section = await get_section(session, sheet_id, section_id)
    subsection_id = subsection_id or generate_id()
    await _ensure_free_id(session, Subsection, subsection_id)

    subsection = await create_item(
        session,
        Subsection,
        id=subsection_id,
        section_id=section_id,
        name=name,
        description=description,
        order=len(section.subsections),
    )
    logger.info(f"Добавлен подраздел {subsection.id} в раздел {section_id}")
    return subsection


async def update_subsection(
    session: AsyncSession, sheet_id: str, section_id: str, subsection_id: str, **fields
) -> Subsection:
    await get_subsection(session, sheet_id, section_id, subsection_id)
    return await update_item(session, Subsection, subsection_id, **_updates(fields))


async def delete_subsection(
    session: AsyncSession, sheet_id: str, section_id: str, subsection_id: str
) -> int:
    await get_subsection(session, sheet_id, section_id, subsection_id)
    await delete_item(session, Subsection, subsection_id)
    return await delete_progress(session, subsection_id=subsection_id)


# ---------------------------------------------------------------------------
# Задачи
# ---------------------------------------------------------------------------


def _difficulty_value(value) -> str:
    parsed = Difficulty.parse(value)
    if parsed is None:
        raise ValidationError(f"Неизвестная сложность: {value}")
    return parsed.value


async def add_problem(
    session: AsyncSession,
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    title: str,
    difficulty: str = Difficulty.EASY.value,
    problem_id: Optional[str] = None,
    created_by: Optional[str] = None,
    **links: str,
) -> Problem:
    await get_subsection(session, sheet_id, section_id, subsection_id)
    problem_id = problem_id or generate_id()
    await _ensure_free_id(session, Problem, problem_id)

    problem = await create_item(
        session,
        Problem,
        id=problem_id,
        subsection_id=subsection_id,
        title=title,
        difficulty=_difficulty_value(difficulty),
        created_by=created_by,
        **_updates(links),
    )
    logger.info(f"Добавлена задача {problem.id} в подраздел {subsection_id}")
    return problem


async def update_problem(
    session: AsyncSession,
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    problem_id: str,
    **fields,
) -> Problem:
    await get_problem(session, sheet_id, section_id, subsection_id, problem_id)
    updates = _updates(fields)
    if "difficulty" in updates:
        updates["difficulty"] = _difficulty_value(updates["difficulty"])
    return await update_item(session, Problem, problem_id, **updates)


async def delete_problem(
    session: AsyncSession,
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    problem_id: str,
) -> int:
    await get_problem(session, sheet_id, section_id, subsection_id, problem_id)
    await delete_item(session, Problem, problem_id)
    return await delete_progress(session, problem_id=problem_id)
