# endpoints/original/recent.py
from sqlalchemy import select

from config import FRONTPAGE_LIMIT, RECENT_MAX_SCORE
from database.story import Story
from database.utils import ids, required
from endpoints.original import original_router
from endpoints.original.frontpage import story_filters
from endpoints.pages import PageKind
from endpoints.queries import decorate_stories, net_score


@original_router.page(PageKind.RECENT)
async def recent(conn, acting_as, page, priming) -> bool:
    # /recent is a little complex: newest first, but only stories nobody has
    # voted up much yet
    rows = (await conn.execute(
        select(Story)
        .where(
            Story.merged_story_id.is_(None),
            Story.is_expired.is_(False),
            net_score(Story) <= RECENT_MAX_SCORE,
        )
        .order_by(Story.id.desc())
        .limit(FRONTPAGE_LIMIT)
    )).all()
    required(rows or None, "stories from /recent")

    users = ids(rows, "user_id")
    stories = ids(rows, "id")

    if acting_as is not None:
        await story_filters(conn, acting_as, stories)

    await decorate_stories(conn, acting_as, users, stories)
    return True
