# endpoints/queries.py
"""Query sequences several pages issue verbatim.

Most of these reads mirror round-trips the real site makes whose results the
benchmark never looks at.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, cast, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from database.comment import Comment
from database.story import HiddenStory, SavedStory, Story, SuggestedTitle
from database.tag import SuggestedTagging, Tag, Tagging
from database.user import User
from database.vote import Vote as VoteRow
from endpoints.pages import Vote


def net_score(model):
    # up/down are unsigned in MySQL, subtracting them uncast can overflow
    return cast(model.upvotes, Integer) - cast(model.downvotes, Integer)


async def merged_stories(conn: AsyncConnection, story_id: int) -> None:
    await conn.execute(select(Story.id).where(Story.merged_story_id == story_id))


async def hotness_inputs(conn: AsyncConnection, story_id: int) -> None:
    """Everything the real site loads to recompute a story's hotness."""
    await conn.execute(
        select(Tag)
        .join(Tagging, Tag.id == Tagging.tag_id)
        .where(Tagging.story_id == story_id)
    )
    await commenter_votes(conn, story_id)
    await merged_stories(conn, story_id)


async def commenter_votes(conn: AsyncConnection, story_id: int) -> None:
    # votes on comments not written by the story's author
    await conn.execute(
        select(Comment.upvotes, Comment.downvotes)
        .join(Story, Story.id == Comment.story_id)
        .where(Comment.story_id == story_id, Comment.user_id != Story.user_id)
    )


async def apply_story_vote(conn: AsyncConnection, story_id: int, vote: Vote, hotness: float) -> None:
    """Count the vote on the story and move its hotness by one.

    The real hotness algorithm is not interesting here, only the ordering it
    produces on the frontpage, so a vote just shifts the score by one.
    """
    await conn.execute(
        update(Story)
        .where(Story.id == story_id)
        .values(
            upvotes=Story.upvotes + (1 if vote is Vote.UP else 0),
            downvotes=Story.downvotes + (0 if vote is Vote.UP else 1),
            hotness=float(hotness) - vote.sign,
        )
    )


async def decorate_stories(conn: AsyncConnection, acting_as: Optional[int], users: set[int], stories: set[int]) -> None:
    """Second half of every story listing: authors, suggestions, tags, highlights."""
    await conn.execute(select(User).where(User.id.in_(users)))
    await conn.execute(select(SuggestedTitle).where(SuggestedTitle.story_id.in_(stories)))
    await conn.execute(select(SuggestedTagging).where(SuggestedTagging.story_id.in_(stories)))

    taggings = await conn.execute(select(Tagging).where(Tagging.story_id.in_(stories)))
    tags = {t.tag_id for t in taggings}
    await conn.execute(select(Tag).where(Tag.id.in_(tags)))

    # also load things that we need to highlight
    if acting_as is not None:
        await conn.execute(
            select(VoteRow).where(
                VoteRow.user_id == acting_as,
                VoteRow.story_id.in_(stories),
                VoteRow.comment_id.is_(None),
            )
        )
        await conn.execute(
            select(HiddenStory).where(HiddenStory.user_id == acting_as, HiddenStory.story_id.in_(stories))
        )
        await conn.execute(
            select(SavedStory).where(SavedStory.user_id == acting_as, SavedStory.story_id.in_(stories))
        )
