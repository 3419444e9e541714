# SheetTrack/src/security/security.py
# -*- coding: utf-8 -*-
"""security.security
~~~~~~~~~~~~~~~~~~~~
JWT помощники и проверки доступа на основе ролей.

Ключевые моменты
================
* Использует *python‑jose* для компактной обработки JWS.
* Экспортирует **create_access_token**, **verify_token** и **require_roles**
  (фабрика зависимостей FastAPI).
* Менторы могут править разборы задач, поэтому часть маршрутов принимает
  набор ролей ``admin_or_mentor``. Вы передаете *минимальный* набор ролей,
  принимаемых для данного маршрута.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt

from src.config.logger import configure_logger
from src.config.settings import settings
from src.domain.enums import Role
from src.utils.exceptions import PermissionDeniedError

logger = configure_logger("security")

# ---------------------------------------------------------------------------
# JWT помощники
# ---------------------------------------------------------------------------


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "token_type": "access"})
    if "sub" in to_encode and not isinstance(to_encode["sub"], str):
        to_encode["sub"] = str(to_encode["sub"])
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as exc:
        logger.error(f"Ошибка проверки JWT: {str(exc)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Недействительный или истекший токен",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    if payload.get("token_type") != "access" or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный payload токена",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


# ---------------------------------------------------------------------------
# Проверка на основе ролей
# ---------------------------------------------------------------------------


def _extract_token(request: Request) -> str:
    auth: str | None = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Отсутствует bearer токен",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth.split(" ", 1)[1]


def require_roles(*allowed_roles: Role) -> Callable[[Request], dict]:
    allowed: set[Role] = set(allowed_roles)

    async def checker(request: Request) -> dict:
        payload = verify_token(_extract_token(request))
        try:
            role = Role(payload["role"])
        except (KeyError, ValueError) as exc:
            logger.error(f"Неверная роль в payload: {payload}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Неверный payload токена",
            ) from exc

        if role not in allowed:
            logger.warning(
                f"Доступ запрещен: {payload.get('sub')} ({role.value}) -> "
                f"{request.method} {request.url.path}"
            )
            raise PermissionDeniedError(
                f"Роль {role.value} не может выполнить это действие"
            )

        return payload

    return checker


# Удобные предустановки --------------------------------------------------------

admin_only = require_roles(Role.ADMIN)

authenticated = require_roles(Role.ADMIN, Role.MENTOR, Role.USER)

admin_or_mentor = require_roles(Role.ADMIN, Role.MENTOR)
