"""
JWT-style token creation and verification.

Tokens are URL-safe base64-encoded JSON payloads signed with HMAC-SHA256::

    base64url({"id": ..., "email": ..., "iat": ..., "exp": ...}) + "." + hexsig

Secret and lifetime come from ``Settings.jwt_secret`` /
``Settings.jwt_expiry_seconds`` (env vars ``JWT_SECRET`` and
``JWT_EXPIRY_SECONDS``).  Tokens are not stored anywhere: a token is valid
iff its signature matches the current secret and it has not expired, so
rotating the secret invalidates every outstanding token.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Callable

from pydantic import BaseModel

from config.settings import Settings
from core.errors import ConfigurationError

Clock = Callable[[], float]


class TokenClaims(BaseModel):
    id: int
    email: str
    iat: int
    exp: int


class InvalidTokenError(Exception):
    """Base class for every reason a presented token is rejected."""


class MalformedTokenError(InvalidTokenError):
    pass


class InvalidSignatureError(InvalidTokenError):
    pass


class TokenExpiredError(InvalidTokenError):
    pass


def _require_secret(settings: Settings) -> bytes:
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET must be set to a non-empty value")
    return settings.jwt_secret.encode()


def _sign(secret: bytes, raw: bytes) -> str:
    return hmac.new(secret, raw, hashlib.sha256).hexdigest()


class TokenIssuer:
    """Create signed, time-limited bearer tokens for verified users."""

    def __init__(self, settings: Settings, clock: Clock = time.time) -> None:
        self._secret = _require_secret(settings)
        self._expiry_seconds = settings.jwt_expiry_seconds
        self._clock = clock

    def issue(self, user_id: int, email: str) -> str:
        """Create a signed token containing ``id``, ``email`` and expiry."""
        now = int(self._clock())
        payload = {
            "id": user_id,
            "email": email,
            "iat": now,
            "exp": now + self._expiry_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + _sign(self._secret, raw)


class TokenVerifier:
    """Check a token's signature and expiry and return its claims."""

    def __init__(self, settings: Settings, clock: Clock = time.time) -> None:
        self._secret = _require_secret(settings)
        self._clock = clock

    def verify(self, token: str) -> TokenClaims:
        """
        Verify token and return its claims.

        Raises ``MalformedTokenError``, ``InvalidSignatureError`` or
        ``TokenExpiredError``; all are ``InvalidTokenError``.
        """
        parts = token.split(".")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise MalformedTokenError("bad format")

        try:
            raw = urlsafe_b64decode(parts[0].encode())
        except (binascii.Error, ValueError) as exc:
            raise MalformedTokenError("bad encoding") from exc

        if not hmac.compare_digest(parts[1].encode(), _sign(self._secret, raw).encode()):
            raise InvalidSignatureError("bad signature")

        try:
            claims = TokenClaims.model_validate_json(raw)
        except ValueError as exc:
            raise MalformedTokenError("bad payload") from exc

        if self._clock() >= claims.exp:
            raise TokenExpiredError("token expired")
        return claims
