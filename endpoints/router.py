# endpoints/router.py
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncConnection

from database.database import ConnectionPool
from endpoints.pages import Page, PageKind, Request
from errors import ConfigurationError, is_store_error

# (conn, acting_as, page, priming) -> needs notifications
Handler = Callable[[AsyncConnection, Optional[int], Page, bool], Awaitable[bool]]
Notifications = Callable[[AsyncConnection, int], Awaitable[None]]


class PageRouter:
    """One query variant: a handler per page kind plus its notifications step.

    Handlers are registered with ``@router.page(PageKind.X)``. A router built
    with ``fallback=`` serves every page it does not override from the
    fallback router, so a variant only has to spell out what it does
    differently.
    """

    def __init__(self, name: str, *, schema: Optional[str] = None, fallback: Optional["PageRouter"] = None):
        self.name = name
        self.schema = schema or name
        self.fallback = fallback
        self._pages: dict[PageKind, Handler] = {}
        self._notifications: Optional[Notifications] = None

    def page(self, kind: PageKind):
        def register(handler: Handler) -> Handler:
            self._pages[kind] = handler
            return handler
        return register

    def notifications(self, fn: Notifications) -> Notifications:
        self._notifications = fn
        return fn

    def resolve(self, kind: PageKind) -> Handler:
        if kind in self._pages:
            return self._pages[kind]
        if self.fallback is not None:
            return self.fallback.resolve(kind)
        raise ConfigurationError(f"variant {self.name!r} has no handler for /{kind.value}")

    def resolve_notifications(self) -> Notifications:
        if self._notifications is not None:
            return self._notifications
        if self.fallback is not None:
            return self.fallback.resolve_notifications()
        raise ConfigurationError(f"variant {self.name!r} has no notifications step")

    def check(self) -> "PageRouter":
        """Fail at startup, not mid-run, if any page kind is unserved."""
        for kind in PageKind:
            self.resolve(kind)
        self.resolve_notifications()
        return self

    def __repr__(self) -> str:
        return f"<PageRouter {self.name}>"


class RequestRouter:
    def __init__(self, variant: PageRouter, pool: ConnectionPool):
        self.variant = variant
        self.pool = pool

    async def handle(self, request: Request, conn: AsyncConnection) -> None:
        handler = self.variant.resolve(request.page.kind)
        with_notifications = await handler(conn, request.acting_as, request.page, request.is_priming)

        if request.acting_as is not None and with_notifications and not request.is_priming:
            await self.variant.resolve_notifications()(conn, request.acting_as)

    async def dispatch(self, request: Request, conn: AsyncConnection) -> None:
        """Run the request on ``conn`` and give the connection back afterwards."""
        try:
            await self.handle(request, conn)
        except Exception as e:
            # the pool went away under an in-flight request: we are shutting down, that's fine
            if self.pool.closed and is_store_error(e):
                logging.debug("ignoring %s on /%s after disconnect: %s", type(e).__name__, request.page.kind.value, e)
                return
            raise
        finally:
            await self.pool.release(conn)
