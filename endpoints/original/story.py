# endpoints/original/story.py
from datetime import datetime

from sqlalchemy import select, update

from database.comment import Comment
from database.story import HiddenStory, ReadRibbon, SavedStory
from database.tag import Tag, Tagging
from database.user import User
from database.utils import get_story, ids, insert_row
from database.vote import Vote as VoteRow
from endpoints.original import original_router
from endpoints.pages import PageKind
from endpoints.queries import merged_stories, net_score


async def touch_read_ribbon(conn, user: int, story: int) -> None:
    """Record that ``user`` has read ``story`` as of now."""
    now = datetime.now()
    ribbon = (await conn.execute(
        select(ReadRibbon).where(ReadRibbon.user_id == user, ReadRibbon.story_id == story)
    )).first()
    if ribbon is None:
        await insert_row(conn, ReadRibbon, created_at=now, updated_at=now, user_id=user, story_id=story)
    else:
        await conn.execute(
            update(ReadRibbon).where(ReadRibbon.id == ribbon.id).values(updated_at=now)
        )


@original_router.page(PageKind.STORY)
async def story_page(conn, acting_as, page, priming) -> bool:
    story = await get_story(conn, page.story)
    author, story_id = story.user_id, story.id

    await conn.execute(select(User).where(User.id == author))

    if acting_as is not None:
        await touch_read_ribbon(conn, acting_as, story_id)

    await merged_stories(conn, story_id)

    saldo = net_score(Comment).label("saldo")
    comments = (await conn.execute(
        select(Comment, saldo)
        .where(Comment.story_id == story_id)
        .order_by(saldo.asc(), Comment.confidence.desc())
    )).all()

    users = ids(comments, "user_id")
    comment_ids = ids(comments, "id")

    await conn.execute(select(User).where(User.id.in_(users)))

    # also load things that we need to highlight
    await conn.execute(
        select(VoteRow).where(VoteRow.comment_id.in_(comment_ids))
    )

    if acting_as is not None:
        await conn.execute(
            select(VoteRow).where(
                VoteRow.user_id == acting_as,
                VoteRow.story_id == story_id,
                VoteRow.comment_id.is_(None),
            )
        )
        await conn.execute(
            select(HiddenStory).where(HiddenStory.user_id == acting_as, HiddenStory.story_id == story_id)
        )
        await conn.execute(
            select(SavedStory).where(SavedStory.user_id == acting_as, SavedStory.story_id == story_id)
        )

    taggings = await conn.execute(select(Tagging).where(Tagging.story_id == story_id))
    tags = ids(taggings, "tag_id")
    await conn.execute(select(Tag).where(Tag.id.in_(tags)))
    return True
