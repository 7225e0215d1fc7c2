# endpoints/original/comment.py
import logging
from datetime import datetime

from sqlalchemy import literal_column, select, update

from config import COMMENT_BODY, COMMENT_CONFIDENCE, COMMENT_HOTNESS_DELTA, COMMENT_MARKDOWN
from database.comment import Comment
from database.story import Story
from database.user import User
from database.utils import acting_user, get_story, increment_counter, insert_row, keystore_key, short_id
from database.vote import Vote as VoteRow
from endpoints.original import original_router
from endpoints.pages import PageKind
from endpoints.queries import hotness_inputs, merged_stories, net_score


@original_router.page(PageKind.COMMENT)
async def post_comment(conn, acting_as, page, priming) -> bool:
    user = acting_user(acting_as, "comments")
    story = await get_story(conn, page.story)
    author, hotness, story_id = story.user_id, story.hotness, story.id

    if not priming:
        await conn.execute(select(User).where(User.id == author))

    parent = None
    if page.parent is not None:
        # check that parent exists
        pid = short_id(page.parent)
        p = (await conn.execute(
            select(Comment).where(Comment.story_id == story_id, Comment.short_id == pid)
        )).first()
        if p is not None:
            parent = (p.id, p.thread_id)
        else:
            logging.warning("failed to find parent comment %s in story %s", pid, story_id)

    cid = short_id(page.comment)
    if not priming:
        # check that short id is available
        await conn.execute(
            select(literal_column("1").label("one")).select_from(Comment).where(Comment.short_id == cid)
        )

    now = datetime.now()
    values = dict(
        created_at=now,
        updated_at=now,
        short_id=cid,
        story_id=story_id,
        user_id=user,
        comment=COMMENT_BODY,
        upvotes=1,
        confidence=COMMENT_CONFIDENCE,
        markeddown_comment=COMMENT_MARKDOWN,
    )
    if parent is not None:
        values.update(parent_comment_id=parent[0], thread_id=parent[1])
    comment = await insert_row(conn, Comment, **values)

    if not priming:
        await conn.execute(
            select(VoteRow).where(
                VoteRow.user_id == user,
                VoteRow.story_id == story_id,
                VoteRow.comment_id == comment,
            )
        )

    await insert_row(conn, VoteRow, user_id=user, story_id=story_id, comment_id=comment, vote=1)

    await merged_stories(conn, story_id)

    # the site loads every comment (sorted, for no reason) just to count them
    saldo = net_score(Comment).label("saldo")
    rows = await conn.execute(
        select(Comment, saldo)
        .where(Comment.story_id == story_id)
        .order_by(saldo.asc(), Comment.confidence.desc())
    )
    count = len(rows.all())

    await conn.execute(update(Story).where(Story.id == story_id).values(comments_count=count))

    if not priming:
        await hotness_inputs(conn, story_id)

    # and hotness moves on every new comment too
    await conn.execute(
        update(Story).where(Story.id == story_id).values(hotness=float(hotness) - COMMENT_HOTNESS_DELTA)
    )

    await increment_counter(conn, keystore_key(user, "comments_posted"))
    return False
