# endpoints/original/comments.py
from sqlalchemy import select

from config import COMMENTS_LIMIT
from database.comment import Comment
from database.story import HiddenStory, Story
from database.user import User
from database.utils import ids, required
from database.vote import Vote as VoteRow
from endpoints.original import original_router
from endpoints.pages import PageKind


@original_router.page(PageKind.COMMENTS)
async def recent_comments(conn, acting_as, page, priming) -> bool:
    comments = (await conn.execute(
        select(Comment)
        .where(Comment.is_deleted.is_(False), Comment.is_moderated.is_(False))
        .order_by(Comment.id.desc())
        .limit(COMMENTS_LIMIT)
    )).all()
    required(comments or None, "comments from /comments")

    commenters = ids(comments, "user_id")
    stories = ids(comments, "story_id")
    comment_ids = ids(comments, "id")

    if acting_as is not None:
        await conn.execute(
            select(HiddenStory.story_id).where(
                HiddenStory.user_id == acting_as, HiddenStory.story_id.in_(stories)
            )
        )

    await conn.execute(select(User).where(User.id.in_(commenters)))

    story_rows = await conn.execute(select(Story).where(Story.id.in_(stories)))
    authors = ids(story_rows, "user_id")

    if acting_as is not None:
        await conn.execute(
            select(VoteRow).where(
                VoteRow.user_id == acting_as, VoteRow.comment_id.in_(comment_ids)
            )
        )

    # rails loads the story authors separately
    await conn.execute(select(User).where(User.id.in_(authors)))
    return True
