"""
FastAPI dependencies for authentication.

Provides ``db_session`` and ``get_current_user`` dependencies that
are used across all protected routes.  The guard hands the resolved
identity to handlers as an explicit ``CurrentUser`` parameter.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import InvalidTokenError, TokenIssuer, TokenVerifier
from auth.models import CurrentUser
from config.settings import Settings
from core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from database.session import get_db_session
from database.users import get_user_by_id

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
    session: AsyncSession = Depends(db_session),
) -> CurrentUser:
    """
    Extract and verify the Bearer token, then load the user it names.

    * no token              → 401
    * malformed / forged /
      expired token         → 403 (one message for all three)
    * user no longer exists → 404
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()

    try:
        claims = verifier.verify(credentials.credentials)
    except InvalidTokenError as exc:
        logger.debug("Rejected token: %s", exc)
        raise ForbiddenError() from exc

    # The lookup yields None for a missing row; test for that explicitly.
    user = await get_user_by_id(session, claims.id)
    if user is None:
        raise NotFoundError("User not found")

    return CurrentUser(id=user.id, email=user.email, name=user.name)
