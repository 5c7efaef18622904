"""
To-do persistence.  Every query is scoped to the owning user; an item that
belongs to somebody else is indistinguishable from one that does not exist.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError
from database.models import Todo


async def list_todos(session: AsyncSession, user_id: int) -> List[Todo]:
    result = await session.execute(
        select(Todo)
        .where(Todo.user_id == user_id)
        .order_by(Todo.created_at.asc(), Todo.id.asc())
    )
    return list(result.scalars().all())


async def get_todo(session: AsyncSession, user_id: int, todo_id: int) -> Todo:
    """Return the caller's to-do or raise ``NotFoundError``."""
    result = await session.execute(
        select(Todo).where(Todo.id == todo_id, Todo.user_id == user_id)
    )
    todo = result.scalar_one_or_none()
    if todo is None:
        raise NotFoundError("Todo not found")
    return todo


async def create_todo(
    session: AsyncSession,
    user_id: int,
    title: str,
    description: str = "",
) -> Todo:
    todo = Todo(user_id=user_id, title=title, description=description)
    session.add(todo)
    await session.flush()
    return todo


async def update_todo(
    session: AsyncSession,
    user_id: int,
    todo_id: int,
    changes: Dict[str, Any],
) -> Todo:
    """Apply a partial update; keys not present in *changes* are left alone."""
    todo = await get_todo(session, user_id, todo_id)
    for field, value in changes.items():
        setattr(todo, field, value)
    todo.updated_at = datetime.now(timezone.utc)
    await session.flush()
    return todo


async def delete_todo(session: AsyncSession, user_id: int, todo_id: int) -> None:
    todo = await get_todo(session, user_id, todo_id)
    await session.delete(todo)
    await session.flush()
