# endpoints/noria/user.py
from sqlalchemy import func, select

from database.story import Story
from database.tag import Tag, Tagging
from database.user import User
from database.utils import username
from endpoints.noria import noria_router
from endpoints.original.user import user_stats
from endpoints.pages import PageKind


@noria_router.page(PageKind.USER)
async def user_profile(conn, acting_as, page, priming) -> bool:
    user = (await conn.execute(
        select(User).where(User.username == username(page.uid))
    )).first()
    if user is None:
        return False
    uid = user.id

    # most popular tag, as id + count; the tag itself is a second lookup
    count = func.count().label("count")
    top = (await conn.execute(
        select(Tag.id, count)
        .select_from(Tagging)
        .join(Tag, Tagging.tag_id == Tag.id)
        .join(Story, Story.id == Tagging.story_id)
        .where(Tag.inactive.is_(False), Story.user_id == uid)
        .group_by(Tag.id)
        .order_by(count.desc())
        .limit(1)
    )).first()
    if top is not None:
        await conn.execute(select(Tag).where(Tag.id == top.id))

    await user_stats(conn, uid)
    return True
