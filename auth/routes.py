"""
Auth API routes — register, login.

Route prefix: /auth
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_settings, get_token_issuer
from auth.jwt import TokenIssuer
from auth.password import MAX_PASSWORD_BYTES, hash_password, verify_password
from config.settings import Settings
from core.errors import HashingError, InternalError, NotFoundError
from database.users import create_user, get_user_by_email, normalize_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

# Unknown email and wrong password share one response so callers cannot
# probe which accounts exist.
_BAD_CREDENTIALS = "User/Password incorrect."


# ── Request / response schemas ─────────────────────────────────────────


def _check_password_length(value: str) -> str:
    if len(value.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        value = normalize_email(value)
        if "@" not in value:
            raise ValueError("not an email address")
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password_length(value)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password_length(value)


class TokenResponse(BaseModel):
    token: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Register a new user."""
    try:
        password_hash = await asyncio.to_thread(
            hash_password, req.password, settings.bcrypt_rounds
        )
    except HashingError as exc:
        logger.exception("Password hashing failed during registration")
        raise InternalError("Failed to register user") from exc

    user = await create_user(session, req.name, req.email, password_hash)
    token = issuer.issue(user.id, user.email)
    logger.info("Registered user %s (%s)", user.email, user.id)

    return {"token": token}


@router.post("/login", response_model=TokenResponse)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Login with email + password."""
    user = await get_user_by_email(session, req.email)
    if user is None:
        logger.info("Login failed: unknown email")
        raise NotFoundError(_BAD_CREDENTIALS)

    if not await asyncio.to_thread(verify_password, req.password, user.password):
        logger.info("Login failed: bad password for user %s", user.id)
        raise NotFoundError(_BAD_CREDENTIALS)

    token = issuer.issue(user.id, user.email)
    logger.info("Login: %s (%s)", user.email, user.id)

    return {"token": token}
