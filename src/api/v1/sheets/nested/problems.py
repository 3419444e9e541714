# -*- coding: utf-8 -*-
"""
Задачи подраздела.

Добавлять и удалять задачи может только админ. Ментор может менять только
ссылки на разбор и заметки: PUT молча сужается до этих полей, PATCH с другими
полями отклоняется.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.domain.enums import Role
from src.repository.sheets import add_problem, delete_problem, update_problem
from src.security.security import admin_only, admin_or_mentor
from src.utils.exceptions import PermissionDeniedError

from ..shared.schemas import (DeleteResponse, ProblemCreateSchema,
                              ProblemReadSchema, ProblemUpdateSchema)

PROBLEM_PATH = (
    "/{sheet_id}/sections/{section_id}/subsections/{subsection_id}/problems"
)
MENTOR_FIELDS = frozenset({"editorial_link", "notes_link"})

router = APIRouter(tags=["📚 Листы - 🧩 Задачи"])
logger = configure_logger("api.sheets")


@router.post(
    PROBLEM_PATH,
    response_model=ProblemReadSchema,
    status_code=status.HTTP_201_CREATED,
)
async def add_problem_endpoint(
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    payload: ProblemCreateSchema,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(admin_only),
):
    """
    Добавить задачу.

    - **title**: Название задачи
    - **difficulty**: Easy / Medium / Hard (по умолчанию Easy)
    - **practiceLink**, **platform**, **youtubeLink**, **editorialLink**, **notesLink**
    """
    problem = await add_problem(
        session,
        sheet_id,
        section_id,
        subsection_id,
        title=payload.title,
        difficulty=payload.difficulty,
        problem_id=payload.id,
        created_by=claims["sub"],
        **payload.model_dump(exclude={"id", "title", "difficulty"}),
    )
    return ProblemReadSchema.model_validate(problem)


@router.put(PROBLEM_PATH + "/{problem_id}", response_model=ProblemReadSchema)
async def replace_problem_endpoint(
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    problem_id: str,
    payload: ProblemUpdateSchema,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(admin_or_mentor),
):
    fields = payload.model_dump()
    if claims["role"] == Role.MENTOR.value:
        fields = {key: value for key, value in fields.items() if key in MENTOR_FIELDS}
    problem = await update_problem(
        session, sheet_id, section_id, subsection_id, problem_id, **fields
    )
    return ProblemReadSchema.model_validate(problem)


@router.patch(PROBLEM_PATH + "/{problem_id}", response_model=ProblemReadSchema)
async def patch_problem_endpoint(
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    problem_id: str,
    payload: ProblemUpdateSchema,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(admin_or_mentor),
):
    """Частичное обновление задачи (правка прямо в таблице)."""
    if claims["role"] == Role.MENTOR.value:
        forbidden = sorted(payload.model_fields_set - MENTOR_FIELDS)
        if forbidden:
            logger.warning(
                f"Ментор {claims['sub']} пытался изменить поля {forbidden} задачи {problem_id}"
            )
            raise PermissionDeniedError(
                f"Ментор может менять только разбор и заметки. Нельзя изменить: {', '.join(forbidden)}"
            )
    problem = await update_problem(
        session,
        sheet_id,
        section_id,
        subsection_id,
        problem_id,
        **payload.model_dump(exclude_unset=True),
    )
    return ProblemReadSchema.model_validate(problem)


@router.delete(PROBLEM_PATH + "/{problem_id}", response_model=DeleteResponse)
async def delete_problem_endpoint(
    sheet_id: str,
    section_id: str,
    subsection_id: str,
    problem_id: str,
    session: AsyncSession = Depends(get_db),
    _claims: dict = Depends(admin_only),
):
    """Удалить задачу и весь прогресс пользователей по ней."""
    deleted = await delete_problem(
        session, sheet_id, section_id, subsection_id, problem_id
    )
    return DeleteResponse(
        message="Задача и связанный прогресс удалены", deleted_progress=deleted
    )
