# -*- coding: utf-8 -*-
"""
Утилиты для проверки и создания администратора системы.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import async_engine
from src.config.logger import configure_logger
from src.config.settings import settings
from src.domain.enums import Role
from src.domain.models import User

logger = configure_logger()


async def check_admin_exists(session: AsyncSession) -> bool:
    """
    Проверяет, существует ли пользователь с ролью ADMIN.

    Returns:
        bool: True если админ существует, False в противном случае
    """
    result = await session.execute(
        select(User.id).where(User.role == Role.ADMIN.value).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def get_or_create_admin(session: AsyncSession, email: str, name: str) -> User:
    """
    Возвращает пользователя с указанным email, повышая его до ADMIN,
    или создает нового администратора.
    """
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(email=email, name=name, role=Role.ADMIN.value)
        session.add(user)
        logger.info(f"✅ Администратор создан ({email})")
    elif user.role != Role.ADMIN.value:
        user.role = Role.ADMIN.value
        logger.info(f"✅ Пользователь {email} назначен администратором")
    else:
        logger.info(f"✅ Пользователь {email} уже администратор")

    await session.commit()
    return user


async def ensure_admin_exists() -> None:
    """
    Проверяет существование админа и создает его при необходимости.

    Без ``ADMIN_EMAIL`` в окружении ничего не делает.
    """
    if not settings.admin_email:
        logger.debug("ADMIN_EMAIL не задан, пропускаем создание администратора")
        return

    async with AsyncSession(async_engine, expire_on_commit=False) as session:
        if await check_admin_exists(session):
            return
        await get_or_create_admin(session, settings.admin_email, settings.admin_name)
