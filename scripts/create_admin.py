#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Скрипт для создания администратора системы.

Создает (или повышает до ADMIN) пользователя с указанным email и печатает
access-токен для работы с API.

    python scripts/create_admin.py admin@example.com --name "Sheet Admin"
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Добавляем путь к src в sys.path
sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from src.clients.database_client import async_engine, init_db  # noqa: E402
from src.config.settings import settings  # noqa: E402
from src.security.security import create_access_token  # noqa: E402
from src.utils.admin_check import get_or_create_admin  # noqa: E402


async def create_admin_user(email: str, name: str) -> str:
    """Создает администратора и возвращает его access-токен."""
    await init_db()
    async with AsyncSession(async_engine, expire_on_commit=False) as session:
        admin = await get_or_create_admin(session, email, name)
    await async_engine.dispose()
    return create_access_token({"sub": admin.id, "role": admin.role})


def main() -> None:
    parser = argparse.ArgumentParser(description="Создание администратора SheetTrack")
    parser.add_argument("email", nargs="?", default=settings.admin_email)
    parser.add_argument("--name", default=settings.admin_name)
    args = parser.parse_args()

    if not args.email:
        print("❌ Укажите email или задайте ADMIN_EMAIL")
        sys.exit(1)

    try:
        token = asyncio.run(create_admin_user(args.email, args.name))
    except Exception as e:
        print(f"❌ Ошибка при создании администратора: {e}")
        sys.exit(1)

    print("✅ Администратор готов:")
    print(f"   Email: {args.email}")
    print("   Role: ADMIN")
    print(f"   Token: {token}")


if __name__ == "__main__":
    main()
