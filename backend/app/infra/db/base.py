"""Database base configuration."""
import os
import ssl
import sys
from typing import Tuple
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


def resolve_database_url(database_url: str) -> Tuple[str, dict]:
    """Return (url, connect_args) ready for create_async_engine.

    Hosted Postgres hands out postgresql:// URLs with sslmode=require. asyncpg
    needs the +asyncpg driver and takes TLS through connect_args instead.
    SQLite URLs pass through untouched.
    """
    url = (database_url or "").strip()
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

    parsed = urlparse(url)
    query = parse_qs(parsed.query, keep_blank_values=True)
    sslmode = query.pop("sslmode", None)
    if sslmode is None:
        return url, {}

    url = urlunparse(parsed._replace(query=urlencode(query, doseq=True)))
    if sslmode != ["require"]:
        return url, {}
    # DATABASE_SSL_VERIFY=true for strict certificate checks
    if os.environ.get("DATABASE_SSL_VERIFY", "false").strip().lower() in ("true", "1"):
        return url, {"ssl": True}
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return url, {"ssl": ctx}


def build_engine(database_url: str, echo: bool = False, **kwargs):
    """Async engine for the configured URL (asyncpg or aiosqlite)."""
    url, connect_args = resolve_database_url(database_url)
    kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, connect_args=connect_args, echo=echo, **kwargs)


def build_sessionmaker(bind) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Tests build their own engines against SQLite
_is_pytest = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ

if not _is_pytest:
    from app.settings import settings

    engine = build_engine(settings.database_url, echo=settings.database_echo)
    AsyncSessionLocal = build_sessionmaker(engine)
else:
    engine = None
    AsyncSessionLocal = None


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# Models are imported in app/main.py (and alembic/env.py) to avoid circular imports.
