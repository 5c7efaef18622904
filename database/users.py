"""
Credential store — persistence of user identities.

Emails are normalised (trimmed, lower-cased) before every write and lookup,
so ``A@x.com`` and ``a@x.com`` are the same account.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError
from database.models import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password_hash: str,
) -> User:
    """
    Insert a new user row.

    Uniqueness of the email is left to the database constraint; a violation
    is raised as ``ConflictError`` and the session is rolled back so no row
    is written.
    """
    user = User(name=name, email=normalize_email(email), password=password_hash)
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        logger.info("Registration rejected, email already present: %s", user.email)
        raise ConflictError("Email already registered") from exc
    return user


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User).where(User.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()
