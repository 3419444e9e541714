# -*- coding: utf-8 -*-
"""
Точка входа FastAPI-приложения SheetTrack.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.v1.progress import router as progress_router
from src.api.v1.sheets import router as sheets_router
from src.api.v1.users import router as users_router
from src.clients.database_client import async_engine, init_db
from src.config.logger import configure_logger
from src.config.settings import settings
from src.config.uvicorn_config import setup_uvicorn_logging
from src.utils.admin_check import ensure_admin_exists
from src.utils.exceptions import APIException, api_exception_handler

logger = configure_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Настраиваем логи uvicorn через loguru
    setup_uvicorn_logging()
    logger.info(f"🔧 Инициализация сервисов ({settings.get_config_source()})...")

    if settings.auto_create_tables:
        await init_db()
        logger.info("✅ Таблицы базы данных готовы")

    await ensure_admin_exists()
    logger.info("🎉 SheetTrack API готов к работе")

    yield

    logger.info("🛑 Завершение работы SheetTrack API")
    await async_engine.dispose()


app = FastAPI(
    title="SheetTrack API",
    description="API листов задач и прогресса пользователей",
    version="0.1.0",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "📚 Листы", "description": "Листы задач"},
        {
            "name": "📚 Листы - 📖 Разделы",
            "description": "Разделы и подразделы листов",
        },
        {
            "name": "📚 Листы - 🧩 Задачи",
            "description": "Задачи подразделов (ментор правит разборы и заметки)",
        },
        {"name": "📊 Прогресс", "description": "Решенные задачи и отметки для повторения"},
        {"name": "👤 Пользователи", "description": "Управление пользователями и ролями"},
    ],
)

# Настройка CORS из настроек
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.get_cors_methods(),
    allow_headers=settings.get_cors_headers(),
)

app.add_exception_handler(APIException, api_exception_handler)


# Middleware для логирования запросов к API
@app.middleware("http")
async def log_api_requests(request, call_next):
    if not request.url.path.startswith("/api/"):
        return await call_next(request)

    route = f"{request.method} {request.url.path}"
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(f"💥 Необработанная ошибка API: {route}")
        raise

    elapsed_ms = (time.perf_counter() - started) * 1000
    message = f"{route} → {response.status_code} ({elapsed_ms:.1f} мс)"
    if response.status_code >= 500:
        logger.error(f"❌ {message}")
    elif response.status_code >= 400:
        logger.warning(f"⚠️ {message}")
    else:
        logger.info(f"✅ {message}")
    return response


# Настраиваем схему безопасности для OpenAPI
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    from fastapi.openapi.utils import get_openapi

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "Bearer": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Введите ваш JWT токен в формате: Bearer <token>",
        }
    }
    openapi_schema["security"] = [{"Bearer": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

app.include_router(sheets_router, prefix="/api/v1")
app.include_router(progress_router, prefix="/api/v1/progress", tags=["📊 Прогресс"])
app.include_router(users_router, prefix="/api/v1/users", tags=["👤 Пользователи"])


@app.get("/api/v1")
async def api_root():
    """Корневой эндпоинт API."""
    return {"message": "SheetTrack API работает", "version": app.version}


@app.get("/api/health")
async def api_health():
    """Проверка живости приложения."""
    return {"status": "ok"}
