# -*- coding: utf-8 -*-
"""
SheetTrack/src/domain/models.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
ORM-модели SQLAlchemy 2.0: пользователи, листы задач и прогресс.

Идентификаторы листов, разделов, подразделов и задач — строки: клиент может
передать свой id, иначе он генерируется (см. ``generate_id``).
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (Boolean, DateTime, ForeignKey, Index, Integer, String,
                        Text)
from sqlalchemy.orm import (DeclarativeBase, Mapped, mapped_column,
                            relationship)

from src.domain.enums import Difficulty, Role


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Короткий случайный идентификатор для сущностей листа."""
    return secrets.token_hex(8)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), default=Role.USER.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Sheet(Base):
    __tablename__ = "sheets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    sections: Mapped[List["Section"]] = relationship(
        back_populates="sheet",
        cascade="all, delete-orphan",
        order_by="Section.order",
        lazy="selectin",
    )


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_id)
    sheet_id: Mapped[str] = mapped_column(
        ForeignKey("sheets.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    order: Mapped[int] = mapped_column(Integer, default=0)

    sheet: Mapped["Sheet"] = relationship(back_populates="sections")
    subsections: Mapped[List["Subsection"]] = relationship(
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="Subsection.order",
        lazy="selectin",
    )


class Subsection(Base):
    __tablename__ = "subsections"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_id)
    section_id: Mapped[str] = mapped_column(
        ForeignKey("sections.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    order: Mapped[int] = mapped_column(Integer, default=0)

    section: Mapped["Section"] = relationship(back_populates="subsections")
    problems: Mapped[List["Problem"]] = relationship(
        back_populates="subsection",
        cascade="all, delete-orphan",
        order_by="Problem.created_at",
        lazy="selectin",
    )


class Problem(Base):
    __tablename__ = "problems"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_id)
    subsection_id: Mapped[str] = mapped_column(
        ForeignKey("subsections.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    practice_link: Mapped[str] = mapped_column(String(1024), default="")
    platform: Mapped[str] = mapped_column(String(64), default="")
    youtube_link: Mapped[str] = mapped_column(String(1024), default="")
    editorial_link: Mapped[str] = mapped_column(String(1024), default="")
    notes_link: Mapped[str] = mapped_column(String(1024), default="")
    difficulty: Mapped[str] = mapped_column(String(16), default=Difficulty.EASY.value)
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    subsection: Mapped["Subsection"] = relationship(back_populates="problems")


class Progress(Base):
    """
    Прогресс пользователя по одной задаче.

    Строка существует, пока задача решена или отмечена для повторения.
    Идентификаторы контейнеров денормализованы на момент действия.
    """

    __tablename__ = "progress"
    __table_args__ = (
        Index("ix_progress_user_problem", "user_id", "problem_id", unique=True),
    )

    id: Mapped[str] = mapped_column(String(160), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    problem_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    sheet_id: Mapped[Optional[str]] = mapped_column(String(64), index=True, nullable=True)
    section_id: Mapped[Optional[str]] = mapped_column(String(64), index=True, nullable=True)
    subsection_id: Mapped[Optional[str]] = mapped_column(
        String(64), index=True, nullable=True
    )
    difficulty: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    marked_for_revision: Mapped[bool] = mapped_column(Boolean, default=False)
    revision_marked_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    def to_record(self) -> dict:
        """Запись в формате API (camelCase), как ее читает хранилище прогресса."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "problemId": self.problem_id,
            "sheetId": self.sheet_id,
            "sectionId": self.section_id,
            "subsectionId": self.subsection_id,
            "difficulty": self.difficulty,
            "completed": self.completed,
            "completedAt": self.completed_at,
            "markedForRevision": self.marked_for_revision,
            "revisionMarkedAt": self.revision_marked_at,
            "updatedAt": self.updated_at,
        }
