# endpoints/original/frontpage.py
from sqlalchemy import select

from config import FRONTPAGE_LIMIT
from database.story import HiddenStory, Story
from database.tag import TagFilter, Tagging
from database.utils import ids, required
from endpoints.original import original_router
from endpoints.pages import PageKind
from endpoints.queries import decorate_stories, net_score


async def story_filters(conn, acting_as, stories):
    """Hidden stories and filtered tags of the logged-in reader."""
    await conn.execute(
        select(HiddenStory.story_id).where(HiddenStory.user_id == acting_as)
    )
    filters = await conn.execute(select(TagFilter).where(TagFilter.user_id == acting_as))
    tags = ids(filters, "tag_id")
    if tags:
        await conn.execute(
            select(Tagging.story_id).where(Tagging.story_id.in_(stories), Tagging.tag_id.in_(tags))
        )


@original_router.page(PageKind.FRONTPAGE)
async def frontpage(conn, acting_as, page, priming) -> bool:
    rows = (await conn.execute(
        select(Story)
        .where(
            Story.merged_story_id.is_(None),
            Story.is_expired.is_(False),
            net_score(Story) >= 0,
        )
        .order_by(Story.hotness.asc())
        .limit(FRONTPAGE_LIMIT)
    )).all()
    required(rows or None, "stories from /frontpage")

    users = ids(rows, "user_id")
    stories = ids(rows, "id")

    if acting_as is not None:
        await story_filters(conn, acting_as, stories)

    await decorate_stories(conn, acting_as, users, stories)
    return True
