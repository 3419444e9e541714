# -*- coding: utf-8 -*-
"""
Конфигурация логов Uvicorn: весь вывод идет через loguru.
"""

import logging

from src.config.logger import InterceptHandler


def setup_uvicorn_logging():
    """Настраивает перехват логов uvicorn, FastAPI и SQLAlchemy."""

    for logger_name in [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "fastapi",
        "sqlalchemy.engine",
        "sqlalchemy.pool",
    ]:
        logger_obj = logging.getLogger(logger_name)
        logger_obj.handlers.clear()
        logger_obj.propagate = False

    # uvicorn.access не перехватываем: запросы логирует middleware приложения
    logging.getLogger("uvicorn").handlers = [InterceptHandler()]
    logging.getLogger("uvicorn.error").handlers = [InterceptHandler()]
    logging.getLogger("fastapi").handlers = [InterceptHandler()]

    # SQLAlchemy — только предупреждения и ошибки
    for name in ("sqlalchemy.engine", "sqlalchemy.pool"):
        sa_logger = logging.getLogger(name)
        sa_logger.handlers = [InterceptHandler()]
        sa_logger.setLevel(logging.WARNING)
