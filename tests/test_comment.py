import logging

import pytest
import pytest_asyncio
from sqlalchemy import select

from config import COMMENT_BODY, COMMENT_CONFIDENCE, STORY_HOTNESS
from database.comment import Comment
from database.keystore import Keystore
from database.story import Story
from database.vote import Vote as VoteRow
from endpoints.pages import CommentPost, Login, Submit
from errors import IntegrityFault


@pytest_asyncio.fixture
async def story(run):
    await run(Login(), acting_as=1, priming=True)
    await run(Login(), acting_as=2, priming=True)
    await run(Submit(b"st0ry", "a story"), acting_as=1, priming=True)


async def comment_row(conn, cid):
    return (await conn.execute(select(Comment).where(Comment.short_id == cid))).one()


@pytest.mark.asyncio
async def test_top_level_comment(story, run, conn):
    assert await run(CommentPost(b"c0001", b"st0ry"), acting_as=2) is False

    comment = await comment_row(conn, "c0001")
    assert comment.comment == COMMENT_BODY
    assert comment.upvotes == 1
    assert comment.confidence == pytest.approx(COMMENT_CONFIDENCE)
    assert comment.parent_comment_id is None

    own = (await conn.execute(select(VoteRow).where(VoteRow.comment_id == comment.id))).all()
    assert [(v.user_id, v.vote) for v in own] == [(2, 1)]

    story = (await conn.execute(select(Story).where(Story.short_id == "st0ry"))).one()
    assert story.comments_count == 1
    assert story.hotness == pytest.approx(STORY_HOTNESS - 1.0)

    counter = (await conn.execute(select(Keystore).where(Keystore.key == "user:2:comments_posted"))).one()
    assert counter.value == 1


@pytest.mark.asyncio
async def test_reply_inherits_thread_and_counts_all_comments(story, run, conn):
    await run(CommentPost(b"c0001", b"st0ry"), acting_as=2, priming=True)
    await run(CommentPost(b"c0002", b"st0ry", parent=b"c0001"), acting_as=1, priming=True)

    parent = await comment_row(conn, "c0001")
    reply = await comment_row(conn, "c0002")
    assert reply.parent_comment_id == parent.id
    assert reply.thread_id == parent.thread_id

    story = (await conn.execute(select(Story).where(Story.short_id == "st0ry"))).one()
    assert story.comments_count == 2
    assert story.hotness == pytest.approx(STORY_HOTNESS - 2.0)


@pytest.mark.asyncio
async def test_missing_parent_posts_top_level(story, run, conn, caplog):
    with caplog.at_level(logging.WARNING):
        await run(CommentPost(b"c0003", b"st0ry", parent=b"gh0st"), acting_as=2)

    assert "failed to find parent comment gh0st" in caplog.text
    assert (await comment_row(conn, "c0003")).parent_comment_id is None


@pytest.mark.asyncio
async def test_comment_on_missing_story_is_a_fault(story, run):
    with pytest.raises(IntegrityFault):
        await run(CommentPost(b"c0004", b"nope0"), acting_as=2)


def sent(statements, fragment):
    return sum(fragment in s for s in statements)


@pytest.mark.asyncio
async def test_priming_comment_skips_live_only_reads(story, run, statements):
    statements.clear()
    await run(CommentPost(b"c0001", b"st0ry"), acting_as=2, priming=True)
    primed = list(statements)
    statements.clear()
    await run(CommentPost(b"c0002", b"st0ry"), acting_as=2)
    live = list(statements)

    # story author, short id availability, own vote on the new comment, hotness inputs
    for fragment in ("FROM users", "SELECT 1 AS one", "FROM votes", "JOIN taggings ON"):
        assert sent(primed, fragment) == 0, fragment
        assert sent(live, fragment) == 1, fragment

    # merged stories are read for the comment count either way, and again for hotness
    assert sent(primed, "stories.merged_story_id = ") == 1
    assert sent(live, "stories.merged_story_id = ") == 2
    assert sent(primed, "INSERT INTO comments") == sent(live, "INSERT INTO comments") == 1
