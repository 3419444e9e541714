# -*- coding: utf-8 -*-
"""
Общие фикстуры для тестирования
"""

import os

# Настройки читаются при импорте src, поэтому окружение задаем заранее
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.pop("ADMIN_EMAIL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,  # noqa: E402
                                    create_async_engine)
from sqlalchemy.pool import NullPool  # noqa: E402

from src.clients.database_client import get_db  # noqa: E402
from src.domain.models import Base  # noqa: E402
from src.main import app  # noqa: E402

from tests.fixtures import FakeRemote, make_store  # noqa: E402


@pytest.fixture
def test_engine(tmp_path):
    """Тестовая SQLite база в файле (по одной на тест)."""
    db_path = tmp_path / "sheettrack.db"

    # Таблицы создаются синхронным движком до запуска event loop
    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}", echo=False, poolclass=NullPool
    )
    yield engine
    engine.sync_engine.dispose()


@pytest.fixture
def test_app(test_engine):
    """Приложение, работающее с тестовой базой."""
    session_maker = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Создать тестовый клиент для API."""
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def remote():
    """Сервер прогресса в памяти."""
    return FakeRemote()


@pytest.fixture
def store(remote):
    """Хранилище прогресса пользователя u1."""
    store, _identity = make_store(remote)
    return store
