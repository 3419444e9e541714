# -*- coding: utf-8 -*-
"""
Разделы и подразделы листа (только админ).
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.repository.sheets import (add_section, add_subsection,
                                   delete_section, delete_subsection,
                                   update_section, update_subsection)
from src.security.security import admin_only

from ..shared.schemas import (ContainerCreateSchema, ContainerUpdateSchema,
                              DeleteResponse, SectionReadSchema,
                              SubsectionReadSchema)

router = APIRouter(tags=["📚 Листы - 📖 Разделы"], dependencies=[Depends(admin_only)])


@router.post(
    "/{sheet_id}/sections",
    response_model=SectionReadSchema,
    status_code=status.HTTP_201_CREATED,
)
async def add_section_endpoint(
    sheet_id: str,
    payload: ContainerCreateSchema,
    session: AsyncSession = Depends(get_db),
):
    section = await add_section(
        session,
        sheet_id,
        name=payload.name,
        description=payload.description,
        section_id=payload.id,
    )
    return SectionReadSchema.model_validate(section)


@router.put("/{sheet_id}/sections/{section_id}", response_model=SectionReadSchema)
async def update_section_endpoint(
    sheet_id: str,
    section_id: str,
    payload: ContainerUpdateSchema,
    session: AsyncSession = Depends(get_db),
):
    section = await update_section(
        session, sheet_id, section_id, **payload.model_dump()
    )
    return SectionReadSchema.model_validate(section)


@router.delete("/{sheet_id}/sections/{section_id}", response_model=DeleteResponse)
async def delete_section_endpoint(
    sheet_id: str, section_id: str, session: AsyncSession = Depends(get_db)
):
    deleted = await delete_section(session, sheet_id, section_id)
    return DeleteResponse(
        message="Раздел и связанный прогресс удалены", deleted_progress=deleted
    )


@router.post(
    "/{sheet_id}/sections/{section_id}/subsections",
    response_model=SubsectionReadSchema,
    status_code=status.HTTP_201_CREATED,
)
async def add_subsection_endpoint(
    sheet_id: str,
    section_id: str,
    payload: ContainerCreateSchema,
    session: AsyncSession = Depends(get_db),
):
    subsection = await add_subsection(
        session,
        sheet_id,
        section_id,
        name=payload.name,
        description=payload.description,
        subsection_id=payload.id,
    )
    return SubsectionReadSchema.model_validate(subsection)


@router.put(
    "/{sheet_id}/sections/{section_id}/subsections/{subsection_id}",
    response_model=SubsectionReadSchema,
)
async def update_subsection_endpoint(
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    payload: ContainerUpdateSchema,
    session: AsyncSession = Depends(get_db),
):
    subsection = await update_subsection(
        session, sheet_id, section_id, subsection_id, **payload.model_dump()
    )
    return SubsectionReadSchema.model_validate(subsection)


@router.delete(
    "/{sheet_id}/sections/{section_id}/subsections/{subsection_id}",
    response_model=DeleteResponse,
)
async def delete_subsection_endpoint(
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    session: AsyncSession = Depends(get_db),
):
    deleted = await delete_subsection(session, sheet_id, section_id, subsection_id)
    return DeleteResponse(
        message="Подраздел и связанный прогресс удалены", deleted_progress=deleted
    )
