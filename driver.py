# driver.py
from __future__ import annotations

import asyncio
import json
import logging
import time

from config import DSN, IN_FLIGHT, LOG_LEVEL, PRIME, TRACE_PATH, VARIANT
from database.admission import ConnectionAdmission, Readiness
from database.database import ConnectionPool, build_engine
from database.schema import prime_schema
from endpoints import RequestRouter, get_variant
from endpoints.pages import Request
from endpoints.records import request_from_record
from errors import ConfigurationError, FatalError, is_store_error

# ───────────────────────────  admission back-off (seconds)
POLL_MIN = 0.0005
POLL_MAX = 0.05


class Dispatcher:
    """Issues requests against one variant, never more than ``in_flight`` at once."""

    def __init__(self, dsn: str, variant: str, in_flight: int):
        self.router = get_variant(variant)
        self.pool = ConnectionPool(build_engine(dsn, in_flight))
        self.admission = ConnectionAdmission(self.pool)
        self.requests = RequestRouter(self.router, self.pool)

        self.completed = 0
        self.dropped = 0
        self._tasks: set[asyncio.Task] = set()
        self._error: Exception | None = None

    async def submit(self, request: Request) -> None:
        """Wait for a free connection, then run ``request`` in the background."""
        if self._error is not None:
            raise self._error

        delay = POLL_MIN
        while True:
            try:
                ready = self.admission.try_admit()
            except Exception as e:
                if not is_store_error(e):
                    raise
                self._drop(request, e)
                return
            if ready is Readiness.READY:
                break
            await asyncio.sleep(delay)
            delay = min(delay * 2, POLL_MAX)

        conn = self.admission.take_connection()
        task = asyncio.create_task(self._run(request, conn))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, request: Request, conn) -> None:
        try:
            await self.requests.dispatch(request, conn)
        except Exception as e:
            if isinstance(e, FatalError) or not is_store_error(e):
                # surfaced by the next submit() or by drain()
                if self._error is None:
                    self._error = e
                return
            self._drop(request, e)
        else:
            self.completed += 1

    async def drain(self) -> None:
        """Wait for every request in flight; re-raise the first fatal error."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._error is not None:
            raise self._error

    def _drop(self, request: Request, e: Exception) -> None:
        self.dropped += 1
        logging.warning("request /%s by %s dropped: %s", request.page.kind.value, request.acting_as, e)

    async def shutdown(self) -> None:
        await self.admission.close()
        await self.pool.disconnect()


async def replay(dispatcher: Dispatcher, path: str) -> int:
    """Submit every request of a JSON-lines trace, in file order."""
    n = 0
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"{path}:{lineno}: not a JSON record") from e
            await dispatcher.submit(request_from_record(record))
            n += 1
    return n


async def main() -> None:
    logging.basicConfig(level=LOG_LEVEL)

    router = get_variant(VARIANT)
    if PRIME:
        await prime_schema(DSN, router.schema)
    if not TRACE_PATH:
        logging.warning("no trace configured, nothing to replay")
        return

    dispatcher = Dispatcher(DSN, VARIANT, IN_FLIGHT)
    start = time.monotonic()
    try:
        issued = await replay(dispatcher, TRACE_PATH)
        await dispatcher.drain()
    finally:
        await dispatcher.shutdown()

    took = time.monotonic() - start
    logging.info(
        "%s: %d requests issued, %d completed, %d dropped in %.2fs",
        VARIANT, issued, dispatcher.completed, dispatcher.dropped, took,
    )


if __name__ == "__main__":
    asyncio.run(main())
