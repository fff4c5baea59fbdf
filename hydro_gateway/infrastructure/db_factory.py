"""
Database connection factory utilities for the Hydro Query Gateway.

Provides centralized management of the async PostgreSQL connection pool the
HTTP handlers share, with an explicit lifecycle: the application opens the
pool at startup and closes (drains) it at shutdown. The PoolManager is created
once per process and injected into request handlers rather than being used as
a bare module global.

Includes a synchronous connectivity probe with retry logic for transient
connection failures using tenacity; the CLI runs it before serving.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator, Optional

import psycopg
from psycopg import AsyncConnection
from psycopg.conninfo import make_conninfo
from psycopg_pool import AsyncConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from hydro_gateway.config import Settings, get_settings
from hydro_gateway.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a libpq conninfo string from settings, quoting each field."""
    settings = settings or get_settings()
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        user=settings.db_user,
        password=settings.db_password,
        dbname=settings.db_name,
    )


class PoolManager:
    """
    Owner of the process-wide async connection pool.

    The pool is created lazily by `open()` and released by `close()`; request
    handlers borrow connections through `connection()`. Connections run in
    autocommit mode since every query the gateway issues is a standalone read.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        dsn_override: Optional[str] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._dsn = dsn_override or build_dsn(self.settings)
        self._pool: Optional[AsyncConnectionPool] = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    async def open(self) -> AsyncConnectionPool:
        """
        Create and open the pool, waiting until `min_size` connections exist.

        Raises
        ------
        psycopg_pool.PoolTimeout
            If the minimum number of connections cannot be established in
            `POOL_TIMEOUT` seconds.
        """
        if self._pool is not None:
            return self._pool

        settings = self.settings
        pool = AsyncConnectionPool(
            conninfo=self._dsn,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            timeout=settings.pool_timeout,
            kwargs={"autocommit": True, "connect_timeout": settings.db_connect_timeout},
            open=False,
            name="hydro-gateway",
        )
        await pool.open(wait=settings.pool_min_size > 0, timeout=settings.pool_timeout)
        self._pool = pool
        log.info(
            "Connection pool opened",
            extra={"min_size": settings.pool_min_size, "max_size": settings.pool_max_size},
        )
        return pool

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[AsyncConnection, None]:
        """
        Borrow a connection from the pool for the duration of the block.

        Example
        -------
            async with manager.connection() as conn:
                await conn.execute("SELECT 1")
        """
        if self._pool is None:
            raise psycopg.OperationalError("connection pool is not open")
        async with self._pool.connection() as conn:
            yield conn

    async def ping(self) -> bool:
        """Return True when a pooled connection answers `SELECT 1`."""
        try:
            async with self.connection() as conn:
                await conn.execute("SELECT 1")
        except Exception:
            log.warning("Database ping failed", exc_info=True)
            return False
        return True

    async def close(self) -> None:
        """Close the pool and release its connections."""
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        log.info("Connection pool closed")


@lru_cache(maxsize=1)
def get_pool_manager() -> PoolManager:
    """
    Return the process-wide PoolManager built from cached settings.
    """
    return PoolManager()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def probe_database(settings: Optional[Settings] = None, dsn_override: Optional[str] = None) -> None:
    """
    Open a dedicated connection and run `SELECT 1`.

    Retries up to 3 times with exponential backoff for transient connection
    errors before giving up.

    Raises
    ------
    psycopg.OperationalError
        If the database is still unreachable after all retry attempts.
    """
    settings = settings or get_settings()
    dsn = dsn_override or build_dsn(settings)
    with psycopg.connect(dsn, connect_timeout=settings.db_connect_timeout) as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()


__all__ = [
    "PoolManager",
    "build_dsn",
    "get_pool_manager",
    "probe_database",
]
