# -*- coding: utf-8 -*-
"""
Pydantic schemas for user management endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from src.api.v1.shared.schemas import CamelModel
from src.domain.enums import Role


class UserRead(CamelModel):
    id: str
    email: str
    name: str
    role: Role
    created_at: Optional[datetime] = None


class UserCreateSchema(CamelModel):
    """Схема для создания пользователя администратором."""

    email: str
    name: str
    role: Role = Role.USER

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Некорректный email")
        return v


class RoleUpdateSchema(CamelModel):
    role: Role


class UserListResponse(CamelModel):
    success: bool = True
    users: List[UserRead]


class RoleUpdateResponse(CamelModel):
    success: bool = True
    message: str
    user: UserRead


class UserDeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted_progress: int = 0
