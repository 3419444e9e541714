# -*- coding: utf-8 -*-
"""
Листы задач: чтение (публично) и управление (админ).
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.repository.sheets import (create_sheet, delete_sheet, get_sheet,
                                   list_sheets, update_sheet)
from src.security.security import admin_only

from ..shared.schemas import (DeleteResponse, SheetCreateSchema,
                              SheetReadSchema, SheetUpdateSchema)

router = APIRouter(tags=["📚 Листы"])
logger = configure_logger("api.sheets")


@router.get("", response_model=List[SheetReadSchema])
async def list_sheets_endpoint(session: AsyncSession = Depends(get_db)):
    """Все листы вместе с разделами, подразделами и задачами."""
    sheets = await list_sheets(session)
    return [SheetReadSchema.model_validate(sheet) for sheet in sheets]


@router.get("/{sheet_id}", response_model=SheetReadSchema)
async def get_sheet_endpoint(sheet_id: str, session: AsyncSession = Depends(get_db)):
    sheet = await get_sheet(session, sheet_id)
    return SheetReadSchema.model_validate(sheet)


@router.post("", response_model=SheetReadSchema, status_code=status.HTTP_201_CREATED)
async def create_sheet_endpoint(
    payload: SheetCreateSchema,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(admin_only),
):
    """
    Создать новый лист.

    - **name**: Название листа
    - **description**: Описание (опционально)
    - **id**: Собственный идентификатор (опционально)
    """
    logger.debug(f"Создание листа с данными: {payload.model_dump()}")
    sheet = await create_sheet(
        session,
        name=payload.name,
        description=payload.description,
        sheet_id=payload.id,
        created_by=claims["sub"],
    )
    return SheetReadSchema.model_validate(sheet)


@router.put("/{sheet_id}", response_model=SheetReadSchema)
async def update_sheet_endpoint(
    sheet_id: str,
    payload: SheetUpdateSchema,
    session: AsyncSession = Depends(get_db),
    _claims: dict = Depends(admin_only),
):
    sheet = await update_sheet(session, sheet_id, **payload.model_dump())
    return SheetReadSchema.model_validate(sheet)


@router.delete("/{sheet_id}", response_model=DeleteResponse)
async def delete_sheet_endpoint(
    sheet_id: str,
    session: AsyncSession = Depends(get_db),
    _claims: dict = Depends(admin_only),
):
    """Удалить лист и весь прогресс пользователей по нему."""
    deleted = await delete_sheet(session, sheet_id)
    return DeleteResponse(
        message="Лист и связанный прогресс удалены", deleted_progress=deleted
    )
