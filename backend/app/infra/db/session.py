"""Request-scoped database sessions."""
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from app.infra.db import base


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one session per request."""
    if base.AsyncSessionLocal is None:
        raise RuntimeError("Database is not configured")
    async with base.AsyncSessionLocal() as session:
        yield session
