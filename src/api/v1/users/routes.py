# -*- coding: utf-8 -*-
"""
Управление пользователями (только админ).

* GET    /api/v1/users                 — список пользователей
* POST   /api/v1/users                 — создать пользователя
* PUT    /api/v1/users/{user_id}/role  — сменить роль
* DELETE /api/v1/users/{user_id}       — удалить пользователя и его прогресс

Админ не может сменить собственную роль или удалить себя.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.domain.enums import Role
from src.repository.users import (create_user, delete_user, list_users,
                                  update_user_role)
from src.security.security import admin_only
from src.utils.exceptions import BadRequestError

from .schemas import (RoleUpdateResponse, RoleUpdateSchema, UserCreateSchema,
                      UserDeleteResponse, UserListResponse, UserRead)

router = APIRouter()
logger = configure_logger("api.users")


@router.get("", response_model=UserListResponse)
async def list_users_endpoint(
    role: Optional[Role] = Query(None, description="Фильтр по роли"),
    session: AsyncSession = Depends(get_db),
    _claims: dict = Depends(admin_only),
):
    users = await list_users(session, role=role)
    return UserListResponse(users=[UserRead.model_validate(user) for user in users])


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user_endpoint(
    payload: UserCreateSchema,
    session: AsyncSession = Depends(get_db),
    _claims: dict = Depends(admin_only),
):
    """
    Создать пользователя.

    - **email**: Уникальный email
    - **name**: Отображаемое имя
    - **role**: admin / mentor / user (по умолчанию user)
    """
    user = await create_user(session, payload.email, payload.name, payload.role)
    return UserRead.model_validate(user)


@router.put("/{user_id}/role", response_model=RoleUpdateResponse)
async def update_user_role_endpoint(
    user_id: str,
    payload: RoleUpdateSchema,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(admin_only),
):
    if claims["sub"] == user_id:
        logger.warning(f"Админ {user_id} пытался сменить собственную роль")
        raise BadRequestError("Нельзя изменить собственную роль")

    user = await update_user_role(session, user_id, payload.role)
    return RoleUpdateResponse(
        message="Роль пользователя обновлена", user=UserRead.model_validate(user)
    )


@router.delete("/{user_id}", response_model=UserDeleteResponse)
async def delete_user_endpoint(
    user_id: str,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(admin_only),
):
    """Удалить пользователя вместе со всем его прогрессом."""
    if claims["sub"] == user_id:
        logger.warning(f"Админ {user_id} пытался удалить собственную учетную запись")
        raise BadRequestError("Нельзя удалить собственную учетную запись")

    deleted = await delete_user(session, user_id)
    return UserDeleteResponse(
        message="Пользователь удален", deleted_progress=deleted
    )
