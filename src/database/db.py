import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from src.conf.config import normalize_database_url

logger = logging.getLogger(__name__)

Base = declarative_base()


def _start_query_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


def _log_query(conn, cursor, statement, parameters, context, executemany):
    duration = (time.perf_counter() - conn.info["query_start_time"].pop()) * 1000
    logger.debug(f"Executed query in {duration:.1f} ms, rows={cursor.rowcount}: {statement}")


class Database:
    """
    Storage handle owning the engine and its connection pool.

    One instance is built at application startup and disposed at shutdown.
    Each request acquires its own session through :meth:`session`.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 20,
        pool_timeout: float = 2.0,
        pool_recycle: int = 30,
        ssl: bool = False,
        echo: bool = False,
    ):
        self.url = normalize_database_url(url)
        engine_kwargs = {"echo": echo}
        if not self.url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=0,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )
            if ssl:
                engine_kwargs["connect_args"] = {"ssl": "require"}
        self.engine = create_async_engine(self.url, **engine_kwargs)
        event.listen(self.engine.sync_engine, "before_cursor_execute", _start_query_timer)
        event.listen(self.engine.sync_engine, "after_cursor_execute", _log_query)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Acquire a session for a single unit of work and release it afterwards.
        """
        db = self.session_factory()
        try:
            yield db
        finally:
            await db.close()

    async def check_connection(self) -> bool:
        """
        Verify that the store answers a trivial query.

        :return: True if the connection works, False otherwise.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False
        logger.info("Database connection successful")
        return True

    async def initialize(self) -> None:
        """
        Check connectivity and fail loudly when the store is unreachable.

        Raises:
            RuntimeError: If no connection could be established.
        """
        if not await self.check_connection():
            raise RuntimeError("Failed to establish database connection")

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/checked.")

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database pool closed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency yielding a session from the application's storage handle.
    This will be overridden in testing environments.
    """
    database: Database = request.app.state.database
    async with database.session() as db:
        yield db
