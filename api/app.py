"""
Application factory.

Everything the request path needs (settings, engine, session factory,
token issuer/verifier) is built here from one ``Settings`` instance and
kept on ``app.state``; nothing is read from module-level globals.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_exception_handlers, register_middleware
from api.todos import router as todos_router
from auth.jwt import Clock, TokenIssuer, TokenVerifier
from auth.routes import router as auth_router
from config.settings import Settings
from database.session import build_engine, build_session_factory, create_schema

logger = logging.getLogger(__name__)


def create_app(settings: Settings, clock: Clock = time.time) -> FastAPI:
    """
    Build the application.

    Raises ``ConfigurationError`` when ``JWT_SECRET`` is missing, so a
    misconfigured process fails at startup instead of on the first login.
    """
    token_issuer = TokenIssuer(settings, clock=clock)
    token_verifier = TokenVerifier(settings, clock=clock)
    engine = build_engine(settings)

    app = FastAPI(
        title="Todo API",
        version="1.0.0",
        description="Multi-user to-do list with token authentication.",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_issuer = token_issuer
    app.state.token_verifier = token_verifier

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix="/auth")
    app.include_router(todos_router, prefix="/todos")

    @app.on_event("startup")
    async def on_startup():
        logger.info("Ensuring database schema…")
        await create_schema(engine)
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await engine.dispose()

    return app
