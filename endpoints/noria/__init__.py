# endpoints/noria/__init__.py
"""Queries rewritten for a dataflow backend that keeps derived views fresh.

Only the pages whose queries differ live here; everything else is served by
the original variant.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncConnection

from database.keystore import Keystore
from database.utils import keystore_key
from database.views import boundary_notifications as boundary
from endpoints.original import original_router
from endpoints.router import PageRouter

noria_router = PageRouter("noria", fallback=original_router)

from endpoints.noria import recent, user  # noqa: E402,F401


@noria_router.notifications
async def notifications(conn: AsyncConnection, uid: int) -> None:
    # unread counts are a maintained view here, no aggregation on read
    await conn.execute(select(boundary.c.notifications).where(boundary.c.user_id == uid))
    await conn.execute(select(Keystore).where(Keystore.key == keystore_key(uid, "unread_messages")))
