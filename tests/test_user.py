import pytest
from sqlalchemy import select

from database.user import User
from endpoints.pages import Login, Logout, Submit, UserPage


@pytest.mark.asyncio
@pytest.mark.parametrize("variant", ["original", "noria"])
async def test_unknown_user_is_a_single_lookup(run, statements, variant):
    assert await run(UserPage(999), acting_as=1, variant=variant) is False
    assert len(statements) == 1
    assert "users.username" in statements[0]


@pytest.mark.asyncio
@pytest.mark.parametrize("variant", ["original", "noria"])
async def test_known_user_profile(run, variant):
    await run(Login(), acting_as=1, priming=True)
    await run(Submit(b"abc12", "mine"), acting_as=1, priming=True)
    assert await run(UserPage(1), acting_as=None, variant=variant) is True


@pytest.mark.asyncio
async def test_login_creates_user_once(run, conn):
    assert await run(Login(), acting_as=7) is False
    assert await run(Login(), acting_as=7) is False

    users = (await conn.execute(select(User.username))).scalars().all()
    assert users == ["user7"]


@pytest.mark.asyncio
async def test_logout_issues_no_queries(run, statements):
    assert await run(Logout(), acting_as=7) is False
    assert statements == []
