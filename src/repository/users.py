# -*- coding: utf-8 -*-
"""
SheetTrack/src/repository/users.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Репозиторий пользователей: список, создание, смена роли и удаление.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.enums import Role
from src.domain.models import User
from src.repository.base import (create_item, delete_item, get_item,
                                 list_items, update_item)
from src.repository.progress import delete_progress
from src.utils.exceptions import ConflictError

logger = configure_logger("repository.users")


async def list_users(session: AsyncSession, role: Optional[Role] = None) -> List[User]:
    """Все пользователи, при необходимости только с заданной ролью."""
    filters = {"role": role.value} if role is not None else {}
    return await list_items(session, User, limit=0, **filters)


async def create_user(
    session: AsyncSession, email: str, name: str, role: Role = Role.USER
) -> User:
    existing = await session.execute(select(User.id).where(User.email == email))
    if existing.first() is not None:
        raise ConflictError(f"Пользователь с email {email} уже существует")
    user = await create_item(session, User, email=email, name=name, role=role.value)
    logger.info(f"Создан пользователь {user.id} ({email}) с ролью {role.value}")
    return user


async def update_user_role(session: AsyncSession, user_id: str, role: Role) -> User:
    user = await update_item(session, User, user_id, role=role.value)
    logger.info(f"Пользователю {user_id} назначена роль {role.value}")
    return user


async def delete_user(session: AsyncSession, user_id: str) -> int:
    """
    Удалить пользователя вместе с его прогрессом.

    Returns:
        Число удаленных записей прогресса.
    """
    await get_item(session, User, user_id)
    deleted = await delete_progress(session, user_id=user_id)
    await delete_item(session, User, user_id)
    return deleted
