# database/admission.py
"""Two-phase admission in front of the connection pool.

A scheduler calls ``try_admit()`` until it reports ``READY`` and then takes the
connection with ``take_connection()``. Because the checkout happens before the
request is handed a connection, the number of requests in flight can never
exceed the pool size, whatever page they end up running.
"""
from __future__ import annotations

import asyncio
import enum
import logging

from sqlalchemy.ext.asyncio import AsyncConnection

from database.database import ConnectionPool
from errors import AdmissionError


class Readiness(enum.Enum):
    NOT_READY = "not_ready"
    READY = "ready"


class _State(enum.Enum):
    EMPTY = "empty"          # no checkout in flight
    ACQUIRING = "acquiring"  # pool.acquire() task outstanding
    HOLDING = "holding"      # connection checked out, waiting to be taken


class ConnectionAdmission:
    def __init__(self, pool: ConnectionPool):
        self._pool = pool
        self._state = _State.EMPTY
        self._pending: asyncio.Task | None = None
        self._conn: AsyncConnection | None = None

    def try_admit(self) -> Readiness:
        """Advance the checkout as far as it can go without waiting.

        Must be called from inside the running event loop. A failed checkout
        puts the machine back to empty and re-raises the store error.
        """
        while True:
            if self._state is _State.EMPTY:
                self._pending = asyncio.ensure_future(self._pool.acquire())
                self._state = _State.ACQUIRING
            elif self._state is _State.ACQUIRING:
                if not self._pending.done():
                    return Readiness.NOT_READY
                task, self._pending = self._pending, None
                self._state = _State.EMPTY
                self._conn = task.result()
                self._state = _State.HOLDING
            else:
                return Readiness.READY

    def take_connection(self) -> AsyncConnection:
        if self._state is not _State.HOLDING:
            raise AdmissionError(
                f"take_connection() called while {self._state.value}; try_admit() must return READY first"
            )
        conn, self._conn = self._conn, None
        self._state = _State.EMPTY
        return conn

    async def close(self) -> None:
        """Drop any outstanding checkout and give back a connection nobody took."""
        if self._pending is not None:
            self._pending.cancel()
            try:
                conn = await self._pending
            except asyncio.CancelledError:
                conn = None
            except Exception as e:
                logging.debug("pending checkout failed during close: %s", e)
                conn = None
            if conn is not None:
                await self._pool.release(conn)
            self._pending = None
        if self._conn is not None:
            await self._pool.release(self._conn)
            self._conn = None
        self._state = _State.EMPTY
