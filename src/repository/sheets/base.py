# -*- coding: utf-8 -*-
"""
Базовые операции с листами задач.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.models import Sheet, generate_id
from src.repository.base import (create_item, delete_item, get_item,
                                 item_exists, update_item)
from src.repository.progress import delete_progress
from src.utils.exceptions import ConflictError

logger = configure_logger("repository.sheets")


async def list_sheets(session: AsyncSession) -> List[Sheet]:
    result = await session.execute(select(Sheet).order_by(Sheet.created_at))
    return list(result.scalars().all())


async def get_sheet(session: AsyncSession, sheet_id: str) -> Sheet:
    return await get_item(session, Sheet, sheet_id)


async def create_sheet(
    session: AsyncSession,
    name: str,
    description: str = "",
    sheet_id: Optional[str] = None,
    created_by: Optional[str] = None,
) -> Sheet:
    sheet_id = sheet_id or generate_id()
    if await item_exists(session, Sheet, sheet_id):
        raise ConflictError(f"Лист с ID {sheet_id} уже существует")

    sheet = await create_item(
        session,
        Sheet,
        id=sheet_id,
        name=name,
        description=description,
        created_by=created_by,
    )
    logger.info(f"Создан лист {sheet.id} ({sheet.name})")
    return sheet


async def update_sheet(session: AsyncSession, sheet_id: str, **fields) -> Sheet:
    updates = {key: value for key, value in fields.items() if value is not None}
    return await update_item(session, Sheet, sheet_id, **updates)


async def delete_sheet(session: AsyncSession, sheet_id: str) -> int:
    """
    Удалить лист вместе с содержимым и прогрессом пользователей по нему.

    Returns:
        Количество удаленных записей прогресса.
    """
    await delete_item(session, Sheet, sheet_id)
    return await delete_progress(session, sheet_id=sheet_id)
