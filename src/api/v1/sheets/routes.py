# -*- coding: utf-8 -*-
"""
Модульные маршруты для листов задач.
"""

from fastapi import APIRouter

from .crud import sheets_router
from .nested import problems_router, sections_router

# Создаем основной роутер
router = APIRouter()

# Подключаем CRUD операции
router.include_router(sheets_router, prefix="/sheets")

# Подключаем вложенные ресурсы
router.include_router(sections_router, prefix="/sheets")
router.include_router(problems_router, prefix="/sheets")
