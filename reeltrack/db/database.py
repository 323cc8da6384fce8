import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from reeltrack.core.errors import PersistenceError

logger = logging.getLogger(__name__)

Base = declarative_base()

# dialects whose insert() supports ON CONFLICT
CONFLICT_INSERTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/").endswith(":"))


class Database:
    """Owns the async engine and session factory.

    Constructed once at startup and handed to the stores.
    """

    def __init__(self, url: str, echo: bool = False):
        kwargs = {}
        if _is_memory_sqlite(url):
            # a single shared connection, otherwise every session sees an empty database
            kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        self.url = url
        self.engine = create_async_engine(url, echo=echo, **kwargs)
        self.session_factory = sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @property
    def conflict_insert(self):
        """The dialect's ON CONFLICT capable insert(), or None."""
        return CONFLICT_INSERTS.get(self.dialect)

    async def create_all(self) -> None:
        # models register themselves on Base
        from reeltrack.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Session scope committing on success; store errors become PersistenceError."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("%s failed: %s", operation, exc)
                raise PersistenceError(f"{operation} failed: {exc}") from exc
