"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import bcrypt

from core.errors import HashingError

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72
DEFAULT_ROUNDS = 12


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (fresh salt per call)."""
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(password.encode(), salt).decode()
    except (ValueError, TypeError) as exc:
        raise HashingError(f"bcrypt failed: {exc}") from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False
