"""Request-scoped identity produced by the auth guard."""

from __future__ import annotations

from pydantic import BaseModel


class CurrentUser(BaseModel):
    id: int
    email: str
    name: str

    model_config = {"frozen": True}
