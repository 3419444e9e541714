# -*- coding: utf-8 -*-
"""
SheetTrack/src/repository/base.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Base repository operations for generic CRUD functionality.

This module provides reusable asynchronous CRUD helpers using SQLAlchemy 2.0
async ORM, with logging and basic validation. It is designed to be stateless
for unit testing simplicity.
"""

from __future__ import annotations

from typing import Any, List, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.models import Base
from src.utils.exceptions import NotFoundError

T = TypeVar("T", bound=Base)

logger = configure_logger("repository")

# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


async def get_item(session: AsyncSession, model: Type[T], item_id: Any) -> T:
    """Retrieve a single item by ID or raise NotFoundError."""
    stmt = (
        select(model)
        .where(getattr(model, "id") == item_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    item = result.scalars().first()
    if item is None:
        raise NotFoundError(resource_type=model.__name__, resource_id=item_id)
    return item


async def item_exists(session: AsyncSession, model: Type[T], item_id: Any) -> bool:
    """Check whether a row with the given primary key exists."""
    stmt = select(getattr(model, "id")).where(getattr(model, "id") == item_id)
    result = await session.execute(stmt)
    return result.first() is not None


async def create_item(session: AsyncSession, model: Type[T], **kwargs: Any) -> T:
    """Create a new item in the database."""
    instance = model(**kwargs)
    session.add(instance)
    await session.commit()
    logger.debug("Created {} with ID {}", model.__name__, instance.id)
    return await get_item(session, model, instance.id)


async def update_item(
    session: AsyncSession, model: Type[T], item_id: Any, **kwargs: Any
) -> T:
    """Update an existing item in the database."""
    instance = await get_item(session, model, item_id)
    for key, value in kwargs.items():
        setattr(instance, key, value)
    await session.commit()
    return await get_item(session, model, item_id)


async def delete_item(session: AsyncSession, model: Type[T], item_id: Any) -> None:
    """Delete an item from the database."""
    instance = await get_item(session, model, item_id)
    await session.delete(instance)
    await session.commit()
    logger.info("Deleted {} with ID {}", model.__name__, item_id)


async def list_items(
    session: AsyncSession,
    model: Type[T],
    skip: int = 0,
    limit: int = 100,
    **filters,
) -> List[T]:
    """Retrieve a list of items filtered by the given criteria."""
    stmt = select(model).filter_by(**filters)

    if skip > 0:
        stmt = stmt.offset(skip)
    if limit > 0:
        stmt = stmt.limit(limit)

    result = await session.execute(stmt)
    items = result.scalars().all()
    logger.debug("Retrieved {} {} items", len(items), model.__name__)
    return list(items)
