# -*- coding: utf-8 -*-
"""
Хранилище прогресса: агрегация и оптимистичная синхронизация с сервером.
"""

from src.service.progress_store.aggregation import build_stats, parse_entries
from src.service.progress_store.remote import (IdentityProvider,
                                               ProgressRemote, StaticIdentity)
from src.service.progress_store.store import ProgressStore
from src.service.progress_store.types import (AggregateStats, ContainerStats,
                                              Mutation, MutationPhase,
                                              ProblemContext, ProblemId,
                                              ProgressEntry, SectionId,
                                              SheetId, SubsectionId)

__all__ = [
    "ProgressStore",
    # Внешние зависимости
    "IdentityProvider",
    "ProgressRemote",
    "StaticIdentity",
    # Типы
    "AggregateStats",
    "ContainerStats",
    "Mutation",
    "MutationPhase",
    "ProblemContext",
    "ProgressEntry",
    "ProblemId",
    "SheetId",
    "SectionId",
    "SubsectionId",
    # Агрегация
    "build_stats",
    "parse_entries",
]
