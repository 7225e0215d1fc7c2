# endpoints/original/submit.py
from datetime import datetime

from sqlalchemy import literal_column, select, update

from config import STORY_DESCRIPTION, STORY_HOTNESS, STORY_MARKDOWN, STORY_REHOTNESS, SUBMIT_TAG
from database.story import Story
from database.tag import Tag, Tagging
from database.utils import (
    acting_user, increment_counter, insert_row, keystore_key, read_counter, required, short_id,
)
from database.vote import Vote as VoteRow
from endpoints.original import original_router
from endpoints.pages import PageKind
from endpoints.queries import commenter_votes


@original_router.page(PageKind.SUBMIT)
async def submit_story(conn, acting_as, page, priming) -> bool:
    user = acting_user(acting_as, "stories")
    sid = short_id(page.story)

    # check that tags are active
    tag = required(
        (await conn.execute(
            select(Tag).where(Tag.inactive.is_(False), Tag.tag.in_([SUBMIT_TAG]))
        )).first(),
        f"active tag {SUBMIT_TAG!r}",
    )

    if not priming:
        # check that story id isn't already assigned
        await conn.execute(
            select(literal_column("1").label("one")).select_from(Story).where(Story.short_id == sid)
        )

    story = await insert_row(
        conn, Story,
        created_at=datetime.now(),
        user_id=user,
        title=page.title,
        description=STORY_DESCRIPTION,
        short_id=sid,
        upvotes=1,
        hotness=STORY_HOTNESS,
        markeddown_description=STORY_MARKDOWN,
    )

    await insert_row(conn, Tagging, story_id=story, tag_id=tag.id)

    key = keystore_key(user, "stories_submitted")
    await increment_counter(conn, key)

    if not priming:
        await read_counter(conn, key)
        await conn.execute(
            select(VoteRow).where(
                VoteRow.user_id == user,
                VoteRow.story_id == story,
                VoteRow.comment_id.is_(None),
            )
        )

    await insert_row(conn, VoteRow, user_id=user, story_id=story, vote=1)

    if not priming:
        await commenter_votes(conn, story)

        # the site writes hotness a second time right after creating the story
        await conn.execute(update(Story).where(Story.id == story).values(hotness=STORY_REHOTNESS))

    return False
