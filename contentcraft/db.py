"""Async database engine and session factory for the database store backend."""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from contentcraft.config import get_settings

settings = get_settings()


class Base(DeclarativeBase):
    """Declarative base for the four entity tables."""

    pass


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by DatabaseStore: one short-lived session per store call."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def create_tables(bind: AsyncEngine) -> None:
    """Create every entity table on `bind` (tests and local SQLite; Alembic owns Postgres)."""
    import contentcraft.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Only connects when STORE_BACKEND=database; the engine is lazy.
engine = create_async_engine(
    settings.database_url,
    echo=settings.app_env == "local" and settings.store_backend == "database",
    future=True,
)

async_session_factory = make_session_factory(engine)
