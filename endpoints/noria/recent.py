# endpoints/noria/recent.py
from sqlalchemy import select

from config import FRONTPAGE_LIMIT
from database.story import HiddenStory, Story
from database.tag import TagFilter, Tagging
from database.utils import ids, required
from endpoints.noria import noria_router
from endpoints.pages import PageKind
from endpoints.queries import decorate_stories, net_score


@noria_router.page(PageKind.RECENT)
async def recent(conn, acting_as, page, priming) -> bool:
    # no score window: the views are fresh, so just the newest stories
    rows = (await conn.execute(
        select(Story, net_score(Story).label("saldo"))
        .where(Story.merged_story_id.is_(None), Story.is_expired.is_(False))
        .order_by(Story.id.desc())
        .limit(FRONTPAGE_LIMIT)
    )).all()
    required(rows or None, "stories from /recent")

    users = ids(rows, "user_id")
    stories = ids(rows, "id")

    if acting_as is not None:
        await conn.execute(
            select(HiddenStory.story_id).where(HiddenStory.user_id == acting_as)
        )
        await conn.execute(select(TagFilter).where(TagFilter.user_id == acting_as))
        await conn.execute(select(Tagging.story_id).where(Tagging.story_id.in_(stories)))

    await decorate_stories(conn, acting_as, users, stories)
    return True
