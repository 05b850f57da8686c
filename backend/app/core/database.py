"""
Async SQLAlchemy setup

The engine and session factory are built on first use so importing models
or settings never opens a connection. PostgreSQL urls are routed to
asyncpg, SQLite urls to aiosqlite.
"""
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from app.core.config import settings

Base = declarative_base()

ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
    "sqlite:///": "sqlite+aiosqlite:///",
}

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None


def get_database_url() -> str:
    """DATABASE_URL with a sync driver prefix swapped for its async driver"""
    url = settings.DATABASE_URL
    for prefix, async_prefix in ASYNC_DRIVERS.items():
        if url.startswith(prefix):
            return async_prefix + url[len(prefix):]
    return url


def _engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        # aiosqlite runs each connection in its own thread
        return {"connect_args": {"check_same_thread": False}, "poolclass": NullPool}
    return {"pool_pre_ping": True}


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        url = get_database_url()
        _engine = create_async_engine(url, echo=settings.DB_ECHO, **_engine_options(url))
    return _engine


def get_session_local() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


def AsyncSessionLocal() -> AsyncSession:
    """Standalone session for code running outside a request (startup, seeding)"""
    return get_session_local()()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency: one session per request.

    Services commit their own units of work; anything still pending when
    the endpoint returns is committed here, and any exception rolls back.
    """
    async with get_session_local()() as session:
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables for every registered model"""
    import app.models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
