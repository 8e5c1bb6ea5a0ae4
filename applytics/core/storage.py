"""Database connection and storage utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from applytics.core.config import settings

if TYPE_CHECKING:
    from applytics.models.setting import Setting


def build_engine(url: str, echo: bool = False, **kwargs: Any) -> AsyncEngine:
    """Create an async engine; SQLite connections get WAL and foreign keys."""
    engine = create_async_engine(url, echo=echo, **kwargs)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine: AsyncEngine = build_engine(settings.database_url, echo=settings.sql_echo)

async_session = build_session_factory(engine)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


async def init_models(target: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet."""
    import applytics.models  # noqa: F401  registers the mappers

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class SettingsStorage:
    """Key-value store for user preferences backed by the settings table.

    Values are JSON documents. The ``read``/``write`` helpers work on a
    caller-provided session so they can join a larger transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self._session_factory = session_factory or async_session

    @staticmethod
    async def read(session: AsyncSession, key: str, default: Any = None) -> Any:
        from applytics.models.setting import Setting

        row = await session.get(Setting, key)
        return row.value if row is not None else default

    @staticmethod
    async def write(session: AsyncSession, key: str, value: Any) -> Setting:
        from applytics.models.setting import Setting

        row = await session.merge(Setting(key=key, value=value))
        # a second write of the same key in this transaction must find the row
        await session.flush()
        return row

    async def get_all(self) -> dict[str, Any]:
        """Return every stored preference."""
        from applytics.models.setting import Setting

        async with self._session_factory() as session:
            result = await session.execute(select(Setting).order_by(Setting.key))
            return {row.key: row.value for row in result.scalars().all()}

    async def get(self, key: str, default: Any = None) -> Any:
        """Return one preference, or ``default`` when it was never saved."""
        async with self._session_factory() as session:
            return await self.read(session, key, default)

    async def save(self, key: str, value: Any) -> None:
        """Insert or replace a preference."""
        async with self._session_factory() as session:
            async with session.begin():
                await self.write(session, key, value)
