# -*- coding: utf-8 -*-
"""
Клиент для работы с базой данных (PostgreSQL в продакшене, SQLite локально).
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)

from src.config.settings import settings
from src.domain.models import Base


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"echo": False}
    return {
        "echo": False,
        "pool_pre_ping": True,  # Проверяем соединение перед использованием
        "pool_recycle": 3600,  # Переподключаемся каждый час
    }


async_engine = create_async_engine(
    settings.database_url, **_engine_options(settings.database_url)
)

# Создаем фабрику асинхронных сессий
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Предоставляет асинхронную сессию базы данных для внедрения зависимостей в FastAPI.

    Yields:
        AsyncSession: Активная сессия базы данных
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """
    Создает все таблицы, определенные в моделях.

    Raises:
        SQLAlchemyError: Ошибки при создании таблиц
    """
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
