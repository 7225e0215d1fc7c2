# endpoints/original/__init__.py
"""Queries as the Lobsters Rails application issues them."""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncConnection

from database.keystore import Keystore
from database.utils import keystore_key
from database.views import replying_comments_for_count as replying
from endpoints.router import PageRouter

original_router = PageRouter("original")

# handler modules register themselves on original_router
from endpoints.original import (  # noqa: E402,F401
    comment, comment_vote, comments, frontpage, login, recent, story, story_vote, submit, user,
)


@original_router.notifications
async def notifications(conn: AsyncConnection, uid: int) -> None:
    await conn.execute(
        select(func.count())
        .select_from(replying)
        .where(replying.c.user_id == uid)
        .group_by(replying.c.user_id)
    )
    await conn.execute(select(Keystore).where(Keystore.key == keystore_key(uid, "unread_messages")))
