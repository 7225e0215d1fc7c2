# endpoints/original/comment_vote.py
from sqlalchemy import insert, select, update

from database.comment import Comment
from database.story import Story
from database.user import User
from database.utils import acting_user, required, short_id
from database.vote import Vote as VoteRow
from endpoints.original import original_router
from endpoints.pages import PageKind, Vote
from endpoints.queries import apply_story_vote, hotness_inputs


def confidence(upvotes: int, downvotes: int) -> float:
    """Stand-in for Comment#calculate_confidence: the plain up ratio."""
    return upvotes / (upvotes + downvotes)


@original_router.page(PageKind.COMMENT_VOTE)
async def vote_on_comment(conn, acting_as, page, priming) -> bool:
    user = acting_user(acting_as, "comments/vote")

    cid = short_id(page.comment)
    comment = required(
        (await conn.execute(select(Comment).where(Comment.short_id == cid))).first(),
        f"comment {cid}",
    )
    author, sid = comment.user_id, comment.story_id

    await conn.execute(
        select(VoteRow).where(
            VoteRow.user_id == user,
            VoteRow.story_id == sid,
            VoteRow.comment_id == comment.id,
        )
    )

    # same as story votes: repeat votes are not detected
    await conn.execute(
        insert(VoteRow).values(user_id=user, story_id=sid, comment_id=comment.id, vote=page.vote.flag)
    )

    await conn.execute(
        update(User).where(User.id == author).values(karma=User.karma + page.vote.sign)
    )

    # every comment starts with its author's upvote, so the ratio is always defined
    up = comment.upvotes + (1 if page.vote is Vote.UP else 0)
    down = comment.downvotes + (0 if page.vote is Vote.UP else 1)
    await conn.execute(
        update(Comment)
        .where(Comment.id == comment.id)
        .values(
            upvotes=Comment.upvotes + (1 if page.vote is Vote.UP else 0),
            downvotes=Comment.downvotes + (0 if page.vote is Vote.UP else 1),
            confidence=confidence(up, down),
        )
    )

    # get all the stuff needed to compute updated hotness
    story = required(
        (await conn.execute(select(Story).where(Story.id == sid))).first(),
        f"story #{sid}",
    )
    if not priming:
        await hotness_inputs(conn, sid)

    await apply_story_vote(conn, sid, page.vote, story.hotness)
    return False
