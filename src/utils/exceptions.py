# -*- coding: utf-8 -*-
"""
Исключения API SheetTrack.

Репозитории и маршруты бросают их напрямую; ``api_exception_handler``
превращает их в ответ того же вида, что и успешные ответы API
(``{"success": false, ...}``), поэтому клиент прогресса проверяет
один и тот же флаг ``success``.
"""

from enum import Enum

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from src.config.logger import configure_logger

logger = configure_logger("api.errors")


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"


class APIException(HTTPException):
    """Базовый класс для исключений API с машинно-читаемым кодом ошибки."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: ErrorCode,
        headers: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

    def to_payload(self) -> dict:
        return {
            "success": False,
            "detail": self.detail,
            "errorCode": self.error_code.value,
        }


class NotFoundError(APIException):
    """Лист, раздел, подраздел или задача не найдены."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str | None = None,
        details: str | None = None,
    ):
        detail = f"{resource_type} не найден"
        if resource_id:
            detail = f"{resource_type} с ID {resource_id} не найден"
        if details:
            detail = f"{detail}: {details}"
        super().__init__(status.HTTP_404_NOT_FOUND, detail, ErrorCode.NOT_FOUND)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(APIException):
    """Элемент с таким ID уже существует."""

    def __init__(self, detail: str):
        super().__init__(status.HTTP_409_CONFLICT, detail, ErrorCode.CONFLICT)


class PermissionDeniedError(APIException):
    """Чужой прогресс или поле задачи, недоступное роли."""

    def __init__(self, detail: str = "Недостаточно прав"):
        super().__init__(
            status.HTTP_403_FORBIDDEN, detail, ErrorCode.PERMISSION_DENIED
        )


class BadRequestError(APIException):
    """Операция запрещена над собственной учетной записью."""

    def __init__(self, detail: str):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, ErrorCode.BAD_REQUEST)


class ValidationError(APIException):
    def __init__(self, detail: str):
        super().__init__(
            status.HTTP_422_UNPROCESSABLE_ENTITY, detail, ErrorCode.VALIDATION_ERROR
        )


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Обработчик FastAPI для ``APIException``."""
    logger.debug(
        f"{exc.error_code.value} на {request.method} {request.url.path}: {exc.detail}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_payload(),
        headers=exc.headers,
    )
