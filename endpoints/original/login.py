from sqlalchemy import insert, literal_column, select

from database.user import User
from database.utils import acting_user, username
from endpoints.original import original_router
from endpoints.pages import PageKind


@original_router.page(PageKind.LOGIN)
async def login(conn, acting_as, page, priming) -> bool:
    name = username(acting_user(acting_as, "login"))
    user = (await conn.execute(
        select(literal_column("1").label("one")).select_from(User).where(User.username == name)
    )).first()

    if user is None:
        await conn.execute(insert(User).values(username=name))
    return False


@original_router.page(PageKind.LOGOUT)
async def logout(conn, acting_as, page, priming) -> bool:
    return False
