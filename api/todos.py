"""
To-do CRUD routes.  Every endpoint sits behind ``get_current_user``.

Route prefix: /todos
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_user
from auth.models import CurrentUser
from database.todos import create_todo, delete_todo, list_todos, update_todo

logger = logging.getLogger(__name__)

router = APIRouter(tags=["todos"])


class TodoCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""


class TodoUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class TodoOut(BaseModel):
    id: int
    title: str
    description: str
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


@router.get("", response_model=List[TodoOut])
async def get_todos(
    session: AsyncSession = Depends(db_session),
    user: CurrentUser = Depends(get_current_user),
):
    """List the caller's to-dos, oldest first."""
    return await list_todos(session, user.id)


@router.post("", response_model=TodoOut, status_code=status.HTTP_201_CREATED)
async def add_todo(
    req: TodoCreate,
    session: AsyncSession = Depends(db_session),
    user: CurrentUser = Depends(get_current_user),
):
    todo = await create_todo(session, user.id, req.title, req.description)
    logger.info("User %s created todo %s", user.id, todo.id)
    return todo


@router.patch("/{todo_id}", response_model=TodoOut)
async def patch_todo(
    todo_id: int,
    req: TodoUpdate,
    session: AsyncSession = Depends(db_session),
    user: CurrentUser = Depends(get_current_user),
):
    """Update only the fields present in the body."""
    changes = req.model_dump(exclude_unset=True, exclude_none=True)
    return await update_todo(session, user.id, todo_id, changes)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_todo(
    todo_id: int,
    session: AsyncSession = Depends(db_session),
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    await delete_todo(session, user.id, todo_id)
    logger.info("User %s deleted todo %s", user.id, todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
