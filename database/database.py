# database/database.py
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base

from config import POOL_TIMEOUT, check_in_flight, parse_dsn
from errors import PoolDisconnected, is_store_error

# 1. Create Base right away
Base = declarative_base()


# 2. Engine: one pooled connection per in-flight request, every statement autocommits
def build_engine(dsn: str, pool_size: int, pool_timeout: float = POOL_TIMEOUT) -> AsyncEngine:
    """Create the async engine backing the connection pool.

    ``max_overflow=0`` makes ``pool_size`` a hard bound on concurrent checkouts.
    In-memory SQLite URLs are not supported (they use a single static connection).
    """
    return create_async_engine(
        parse_dsn(dsn),
        echo=False,
        pool_size=check_in_flight(pool_size),
        max_overflow=0,
        pool_timeout=pool_timeout,
        isolation_level="AUTOCOMMIT",
    )


class ConnectionPool:
    """The bounded pool every request borrows its connection from."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.closed = False

    async def acquire(self) -> AsyncConnection:
        if self.closed:
            raise PoolDisconnected("connection pool has been disconnected")
        return await self.engine.connect()

    async def release(self, conn: AsyncConnection) -> None:
        try:
            if self.closed:
                # the disposed pool would only park it, so close the DBAPI connection itself
                await conn.invalidate()
            await conn.close()
        except Exception as e:
            # the server may already be gone at shutdown
            if not (self.closed and is_store_error(e)):
                raise
            logging.debug("closing connection after disconnect failed: %s", e)

    async def disconnect(self) -> None:
        self.closed = True
        await self.engine.dispose()
        logging.info("connection pool disconnected")


# 3. Import the models AFTER (they will already see Base)
from database import user, story, comment, vote, tag, keystore, views  # noqa: E402,F401
