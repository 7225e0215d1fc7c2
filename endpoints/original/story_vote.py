# endpoints/original/story_vote.py
from sqlalchemy import insert, select, update

from database.user import User
from database.utils import acting_user, get_story
from database.vote import Vote as VoteRow
from endpoints.original import original_router
from endpoints.pages import PageKind
from endpoints.queries import apply_story_vote, hotness_inputs


@original_router.page(PageKind.STORY_VOTE)
async def vote_on_story(conn, acting_as, page, priming) -> bool:
    user = acting_user(acting_as, "stories/vote")
    story = await get_story(conn, page.story)
    author, score, story_id = story.user_id, story.hotness, story.id

    await conn.execute(
        select(VoteRow).where(
            VoteRow.user_id == user,
            VoteRow.story_id == story_id,
            VoteRow.comment_id.is_(None),
        )
    )

    # no duplicate check, a second vote by the same user is inserted again
    # TODO: strict mode that rejects repeat votes for correctness runs
    await conn.execute(insert(VoteRow).values(user_id=user, story_id=story_id, vote=page.vote.flag))

    await conn.execute(
        update(User).where(User.id == author).values(karma=User.karma + page.vote.sign)
    )

    if not priming:
        await hotness_inputs(conn, story_id)

    await apply_story_vote(conn, story_id, page.vote, score)
    return False
