"""Pytest configuration for tests directory."""
import sys
from pathlib import Path

# Add the backend directory to Python path
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.infra.db.base import Base, build_sessionmaker
from app.infra.db.models import *  # noqa: F401, F403

pytest_plugins = ("pytest_asyncio",)


def pytest_configure(config):
    """Register markers and make asyncio_mode=auto the default."""
    config.addinivalue_line(
        "markers", "integration: marks tests that need a real DB (deselect with '-m \"not integration\"')"
    )
    # Async tests/fixtures run without @pytest.mark.asyncio on each
    config.option.asyncio_mode = getattr(config.option, "asyncio_mode", None) or "auto"


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with the full schema; one shared connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_sessionmaker(db_engine)


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session
