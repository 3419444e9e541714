# -*- coding: utf-8 -*-
"""
SheetTrack/src/config/settings.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Конфигурация настроек приложения с использованием Pydantic.

Этот модуль загружает конфигурацию из .env файла, предоставляя централизованную
систему управления настройками для сервера и клиента прогресса.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

"""Загрузка .env производится ТОЛЬКО если файл существует.
В контейнере используем переменные окружения, переданные Docker/Compose.
"""
# Base directory for the project (SheetTrack/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

ENV_PATH = (BASE_DIR / ".env").resolve()


def _split_csv(value: str) -> list[str]:
    """Строка вида "a, b,c" -> ["a", "b", "c"]; "*" остается как есть."""
    if value.strip() == "*":
        return ["*"]
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Настройки приложения, загружаемые из .env файла."""

    _env_file = ENV_PATH if ENV_PATH.exists() else None

    model_config = SettingsConfigDict(
        env_file=_env_file,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Конфигурация базы данных
    database_url: str = "sqlite+aiosqlite:///./sheettrack.db"
    # Создавать таблицы при старте приложения
    auto_create_tables: bool = True

    # Конфигурация JWT
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    # Администратор по умолчанию (создается при старте, если задан)
    admin_email: str | None = None
    admin_name: str = "Administrator"

    # Конфигурация приложения
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    frontend_port: int | None = None

    # Конфигурация CORS
    cors_allow_origins: str = ""
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    cors_allow_headers: str = "Authorization,Content-Type"

    # Клиент API прогресса (используется хранилищем прогресса)
    progress_api_base_url: str = "http://localhost:8000/api/v1"
    progress_api_timeout: float = 10.0
    # Размер списков последней активности
    progress_recent_limit: int = 10

    def get_allowed_origins(self) -> list[str]:
        """Явные cors_allow_origins, иначе localhost фронтенда."""
        if self.cors_allow_origins:
            return _split_csv(self.cors_allow_origins)
        port = self.frontend_port or 3000
        return [f"http://localhost:{port}", f"http://127.0.0.1:{port}"]

    def get_cors_methods(self) -> list[str]:
        return _split_csv(self.cors_allow_methods)

    def get_cors_headers(self) -> list[str]:
        return _split_csv(self.cors_allow_headers)

    def get_config_source(self) -> str:
        """Возвращает информацию об источнике конфигурации для отладки."""
        if ENV_PATH.exists():
            return f".env: {ENV_PATH}"
        return "environment variables only"


settings = Settings()
