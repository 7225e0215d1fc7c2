# endpoints/original/user.py
from sqlalchemy import func, literal_column, select

from database.story import Story
from database.tag import Tag, Tagging
from database.user import Hat, User
from database.utils import keystore_key, read_counter, username
from endpoints.original import original_router
from endpoints.pages import PageKind


async def user_stats(conn, uid: int) -> None:
    await read_counter(conn, keystore_key(uid, "stories_submitted"))
    await read_counter(conn, keystore_key(uid, "comments_posted"))
    await conn.execute(
        select(literal_column("1").label("one")).select_from(Hat).where(Hat.user_id == uid).limit(1)
    )


@original_router.page(PageKind.USER)
async def user_profile(conn, acting_as, page, priming) -> bool:
    user = (await conn.execute(
        select(User).where(User.username == username(page.uid))
    )).first()
    if user is None:
        # profile of someone who never logged in
        return False
    uid = user.id

    # most popular tag
    await conn.execute(
        select(Tag)
        .join(Tagging, Tagging.tag_id == Tag.id)
        .join(Story, Story.id == Tagging.story_id)
        .where(Tag.inactive.is_(False), Story.user_id == uid)
        .group_by(Tag.id)
        .order_by(func.count(Tagging.tag_id).desc())
        .limit(1)
    )

    await user_stats(conn, uid)
    return True
