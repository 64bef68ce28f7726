# db.py
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from config import settings
from db_base import Base  # <- import Base from separate module


def engine_options(database_url: str) -> dict[str, Any]:
    """
    Engine keyword arguments for ``database_url``.

    Server databases get connection liveness checks; SQLite needs none.
    SQL echo is left to the "sqlalchemy.engine" logger (config/logging.py).
    """
    options: dict[str, Any] = {"future": True}
    if make_url(database_url).get_backend_name() != "sqlite":
        options["pool_pre_ping"] = True
    return options


# ---------- Engine & Session (async) ----------

engine = create_async_engine(
    settings.DATABASE_URL,  # e.g. postgresql+asyncpg://... or sqlite+aiosqlite:///...
    **engine_options(settings.DATABASE_URL),
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)


async def init_db() -> None:
    """Create any missing tables from ORM metadata."""
    # Import models so they are registered on Base.metadata
    import db_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ---------- FastAPI dependency ----------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async DB session."""
    async with AsyncSessionLocal() as session:
        yield session
