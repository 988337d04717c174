"""Async database engine, session factory and declarative base."""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings

settings = get_settings()

ASYNC_DRIVERS = ("+asyncpg", "+aiosqlite")


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,
)

SessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def sync_database_url(url: str) -> str:
    """The same URL on the default sync driver, for Alembic and other sync tools.

    "postgresql+asyncpg://u@h/db" -> "postgresql://u@h/db"
    """
    scheme, sep, rest = url.partition("://")
    for driver in ASYNC_DRIVERS:
        if scheme.endswith(driver):
            scheme = scheme[: -len(driver)]
    return f"{scheme}{sep}{rest}"


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a session per request."""
    async with SessionLocal() as session:
        yield session


async def create_tables() -> None:
    """Create all tables (dev convenience; production uses Alembic)."""
    import app.models  # noqa: F401  registers mappers on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
