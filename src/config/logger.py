# -*- coding: utf-8 -*-
"""
Настройка логирования для SheetTrack с использованием loguru.

Стандартный ``logging`` (uvicorn, SQLAlchemy, FastAPI) перехватывается и
направляется в loguru. Каждый модуль получает логгер через
``configure_logger("<компонент>")``; имя компонента попадает в формат строки.

Переменные окружения:
    LOG_LEVEL  уровень консольного вывода (INFO)
    LOG_FILE   путь к файлу логов; если задан, пишем и в файл с ротацией
"""
import logging
import os
import sys

from loguru import logger

# Логгеры сторонних библиотек, которые не нужны в консоли
_SILENCED_PREFIXES = ("httpx", "httpcore", "urllib3", "aiosqlite")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[component]} | {name}:{function}:{line} - {message}"
)


class InterceptHandler(logging.Handler):
    """Перехватывает стандартные логи и перенаправляет их в loguru."""

    def emit(self, record):
        # Стартовые INFO-сообщения uvicorn (Started server и т.п.)
        if record.name.startswith("uvicorn") and record.levelno == logging.INFO:
            return
        if record.name.startswith(_SILENCED_PREFIXES):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(component=record.name).opt(
            depth=depth, exception=record.exc_info
        ).log(level, record.getMessage())


def _setup() -> None:
    logger.remove()
    logger.configure(extra={"component": "sheettrack"})

    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level=LOG_LEVEL,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )
    if LOG_FILE:
        logger.add(
            LOG_FILE,
            format=FILE_FORMAT,
            level=LOG_LEVEL,
            rotation="10 MB",
            retention="14 days",
            encoding="utf-8",
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


_setup()


def configure_logger(name: str = "sheettrack"):
    """
    Возвращает настроенный логгер.

    Args:
        name: Имя компонента, выводится в каждой строке лога

    Returns:
        loguru.Logger: Логгер с привязанным ``component``
    """
    return logger.bind(component=name)
