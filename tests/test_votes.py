import pytest
import pytest_asyncio
from sqlalchemy import select

from config import STORY_HOTNESS
from database.comment import Comment
from database.story import Story
from database.user import User
from database.vote import Vote as VoteRow
from endpoints.original.comment_vote import confidence
from endpoints.pages import CommentPost, CommentVote, Login, StoryVote, Submit, Vote
from errors import IntegrityFault


async def story_row(conn, sid="abc12"):
    return (await conn.execute(select(Story).where(Story.short_id == sid))).one()


@pytest_asyncio.fixture
async def seeded(run):
    # user1 submits, user2 votes
    await run(Login(), acting_as=1, priming=True)
    await run(Login(), acting_as=2, priming=True)
    await run(Submit(b"abc12", "a story"), acting_as=1, priming=True)


@pytest.mark.asyncio
async def test_upvote_lowers_hotness_and_credits_author(seeded, run, conn):
    assert await run(StoryVote(b"abc12", Vote.UP), acting_as=2) is False

    story = await story_row(conn)
    assert story.upvotes == 2
    assert story.downvotes == 0
    assert story.hotness == pytest.approx(STORY_HOTNESS - 1)
    assert story.hotness == pytest.approx(-19217.2884921)

    author = (await conn.execute(select(User).where(User.username == "user1"))).one()
    assert author.karma == 1


@pytest.mark.asyncio
async def test_downvote_raises_hotness_and_debits_author(seeded, run, conn):
    await run(StoryVote("abc12", Vote.DOWN), acting_as=2)

    story = await story_row(conn)
    assert story.downvotes == 1
    assert story.hotness == pytest.approx(STORY_HOTNESS + 1)

    votes = (await conn.execute(select(VoteRow).where(VoteRow.user_id == 2))).all()
    assert [v.vote for v in votes] == [0]


@pytest.mark.asyncio
async def test_repeat_votes_are_all_recorded(seeded, run, conn):
    await run(StoryVote(b"abc12", Vote.UP), acting_as=2)
    await run(StoryVote(b"abc12", Vote.UP), acting_as=2)

    votes = (await conn.execute(
        select(VoteRow).where(VoteRow.user_id == 2, VoteRow.comment_id.is_(None))
    )).all()
    assert len(votes) == 2
    assert (await story_row(conn)).upvotes == 3


@pytest.mark.asyncio
async def test_vote_on_missing_story_is_a_fault(seeded, run):
    with pytest.raises(IntegrityFault):
        await run(StoryVote(b"nope0", Vote.UP), acting_as=2)


@pytest.mark.asyncio
async def test_vote_requires_a_user(seeded, run):
    with pytest.raises(IntegrityFault):
        await run(StoryVote(b"abc12", Vote.UP), acting_as=None)


@pytest.mark.asyncio
async def test_comment_downvote_updates_confidence_from_new_counts(seeded, run, conn):
    await run(CommentPost(b"c0001", b"abc12"), acting_as=1, priming=True)
    hotness = (await story_row(conn)).hotness

    assert await run(CommentVote(b"c0001", Vote.DOWN), acting_as=2) is False

    comment = (await conn.execute(select(Comment).where(Comment.short_id == "c0001"))).one()
    assert (comment.upvotes, comment.downvotes) == (1, 1)
    assert comment.confidence == pytest.approx(0.5)

    story = await story_row(conn)
    assert story.downvotes == 1
    assert story.hotness == pytest.approx(hotness + 1)

    author = (await conn.execute(select(User).where(User.username == "user1"))).one()
    assert author.karma == -1


@pytest.mark.asyncio
async def test_vote_on_missing_comment_is_a_fault(seeded, run):
    with pytest.raises(IntegrityFault):
        await run(CommentVote(b"zzzzz", Vote.UP), acting_as=2)


def test_confidence_is_the_up_ratio():
    assert confidence(1, 0) == 1.0
    assert confidence(3, 1) == 0.75


@pytest.mark.asyncio
async def test_mixed_votes_move_hotness_by_the_net_count(seeded, run, conn):
    for vote in [Vote.UP, Vote.DOWN, Vote.UP, Vote.UP, Vote.DOWN]:
        await run(StoryVote(b"abc12", vote), acting_as=2)

    story = await story_row(conn)
    assert (story.upvotes, story.downvotes) == (1 + 3, 2)
    assert story.hotness == pytest.approx(STORY_HOTNESS - (3 - 2))


# reads a live vote makes to recompute hotness, skipped while priming
HOTNESS_READS = ("JOIN taggings ON", "comments.user_id != stories.user_id", "stories.merged_story_id = ")


def sent(statements, fragment):
    return sum(fragment in s for s in statements)


def writes(statements):
    return [s for s in statements if not s.lstrip().startswith("SELECT")]


@pytest.mark.asyncio
async def test_priming_story_vote_skips_hotness_reads(seeded, run, statements):
    statements.clear()
    await run(StoryVote(b"abc12", Vote.UP), acting_as=2, priming=True)
    primed = list(statements)
    statements.clear()
    await run(StoryVote(b"abc12", Vote.UP), acting_as=2)
    live = list(statements)

    for fragment in HOTNESS_READS:
        assert sent(primed, fragment) == 0, fragment
        assert sent(live, fragment) == 1, fragment
    assert writes(primed) == writes(live)


@pytest.mark.asyncio
async def test_priming_comment_vote_skips_hotness_reads(seeded, run, statements):
    await run(CommentPost(b"c0001", b"abc12"), acting_as=1, priming=True)

    statements.clear()
    await run(CommentVote(b"c0001", Vote.UP), acting_as=2, priming=True)
    primed = list(statements)
    statements.clear()
    await run(CommentVote(b"c0001", Vote.UP), acting_as=2)
    live = list(statements)

    for fragment in HOTNESS_READS:
        assert sent(primed, fragment) == 0, fragment
        assert sent(live, fragment) == 1, fragment
    assert writes(primed) == writes(live)
