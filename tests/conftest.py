"""
Shared fixtures: a throwaway SQLite database per test and an app wired to it.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from api.app import create_app
from config.settings import Settings
from database.session import build_engine, build_session_factory, create_schema

TEST_SECRET = "test-secret-do-not-use"


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "todos.db"


@pytest.fixture
def settings(db_path) -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret=TEST_SECRET,
        database_url=f"sqlite+aiosqlite:///{db_path}",
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sync_engine(db_path):
    """Plain synchronous view of the same database, for assertions."""
    engine = create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


@pytest_asyncio.fixture
async def session(settings):
    engine = build_engine(settings)
    await create_schema(engine)
    factory = build_session_factory(engine)
    async with factory() as s:
        yield s
    await engine.dispose()
