# -*- coding: utf-8 -*-
"""
Маршруты FastAPI для прогресса пользователей по задачам.

* GET  /api/v1/progress/{user_id}           — все записи прогресса
* POST /api/v1/progress/toggle              — решена / не решена
* POST /api/v1/progress/toggle-revision     — отметка «повторить»
* GET  /api/v1/progress/stats/{user_id}     — агрегированная статистика
* GET  /api/v1/progress/revision/{user_id}  — задачи для повторения

✔ Пользователь читает и меняет только *свой* прогресс.
✔ Админ может читать прогресс любого пользователя.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.config.settings import settings
from src.domain.enums import ProgressFlag, Role
from src.repository.progress import (get_revision_problems, get_user_progress,
                                     set_progress_flag)
from src.security.security import authenticated
from src.service.progress_store.aggregation import build_stats, parse_entries
from src.utils.exceptions import PermissionDeniedError

from .schemas import (ProgressListResponse, ProgressRead, RevisionListResponse,
                      StatsResponse, ToggleProblemRequest, ToggleResponse,
                      ToggleRevisionRequest)

router = APIRouter()
logger = configure_logger("api.progress")

# -------------------------- helpers -----------------------------------------


def _ensure_can_read(user_id: str, claims: dict) -> None:
    if claims["sub"] == user_id or claims.get("role") == Role.ADMIN.value:
        return
    raise PermissionDeniedError("Нет доступа к прогрессу другого пользователя")


def _ensure_can_write(user_id: str, claims: dict) -> None:
    if claims["sub"] != user_id:
        raise PermissionDeniedError("Нельзя менять прогресс другого пользователя")


# -------------------------- endpoints ---------------------------------------


@router.get("/stats/{user_id}", response_model=StatsResponse)
async def get_progress_stats(
    user_id: str,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(authenticated),
):
    """Агрегированная статистика: по листам, разделам, подразделам и сложности."""
    _ensure_can_read(user_id, claims)
    rows = await get_user_progress(session, user_id)
    entries = parse_entries([row.to_record() for row in rows])
    stats = build_stats(entries.values(), limit=settings.progress_recent_limit)
    return StatsResponse(stats=stats.to_dict())


@router.get("/revision/{user_id}", response_model=RevisionListResponse)
async def list_revision_problems(
    user_id: str,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(authenticated),
):
    """Задачи, отмеченные для повторения, от последних к первым."""
    _ensure_can_write(user_id, claims)
    rows = await get_revision_problems(session, user_id)
    return RevisionListResponse(
        revision_problems=[ProgressRead.model_validate(row) for row in rows]
    )


@router.get("/{user_id}", response_model=ProgressListResponse)
async def list_user_progress(
    user_id: str,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(authenticated),
):
    """Все записи прогресса пользователя."""
    logger.debug(f"Fetching progress, user_id: {claims['sub']}, requested: {user_id}")
    _ensure_can_read(user_id, claims)
    rows = await get_user_progress(session, user_id)
    return ProgressListResponse(
        progress=[ProgressRead.model_validate(row) for row in rows]
    )


@router.post("/toggle", response_model=ToggleResponse)
async def toggle_problem(
    payload: ToggleProblemRequest,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(authenticated),
):
    """Отметить задачу решенной или снять отметку (отметка «повторить» сохраняется)."""
    _ensure_can_write(payload.user_id, claims)
    row = await set_progress_flag(
        session,
        payload.user_id,
        payload.problem_id,
        ProgressFlag.COMPLETED,
        payload.completed,
        sheet_id=payload.sheet_id,
        section_id=payload.section_id,
        subsection_id=payload.subsection_id,
        difficulty=payload.difficulty,
    )
    return ToggleResponse(
        progress=ProgressRead.model_validate(row) if row is not None else None
    )


@router.post("/toggle-revision", response_model=ToggleResponse)
async def toggle_revision(
    payload: ToggleRevisionRequest,
    session: AsyncSession = Depends(get_db),
    claims: dict = Depends(authenticated),
):
    """Поставить или снять отметку «повторить» (статус решения сохраняется)."""
    _ensure_can_write(payload.user_id, claims)
    row = await set_progress_flag(
        session,
        payload.user_id,
        payload.problem_id,
        ProgressFlag.MARKED_FOR_REVISION,
        payload.marked_for_revision,
        sheet_id=payload.sheet_id,
        section_id=payload.section_id,
        subsection_id=payload.subsection_id,
        difficulty=payload.difficulty,
    )
    return ToggleResponse(
        progress=ProgressRead.model_validate(row) if row is not None else None
    )
