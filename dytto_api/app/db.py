from collections.abc import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from dytto_api.app.config import settings

DATABASE_URL = settings.resolved_database_url


class Base(DeclarativeBase):
    pass


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False} if _is_sqlite(DATABASE_URL) else {},
)


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite only enforces foreign keys when each connection opts in."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _foreign_keys_on(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


if _is_sqlite(DATABASE_URL):
    enable_sqlite_foreign_keys(engine)


async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables and apply pragmas."""
    import dytto_api.app.models  # noqa: F401 — ensure models are registered

    if _is_sqlite(DATABASE_URL):
        settings.data_dir.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        if _is_sqlite(DATABASE_URL):
            # SQLite performance & safety pragmas
            await conn.execute(text("PRAGMA journal_mode = WAL"))
            await conn.execute(text("PRAGMA synchronous = NORMAL"))
            await conn.execute(text("PRAGMA busy_timeout = 5000"))

        await conn.run_sync(Base.metadata.create_all)
