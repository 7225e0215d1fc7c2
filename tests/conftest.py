import pytest
import pytest_asyncio
from sqlalchemy import event, insert

from database.database import Base, ConnectionPool, build_engine
from database.tag import Tag
from endpoints import get_variant
from endpoints.pages import Request


@pytest.fixture
def dsn(tmp_path):
    # file-backed: every pooled connection must see the same database
    return f"sqlite+aiosqlite:///{tmp_path / 'lobsters.db'}"


@pytest_asyncio.fixture
async def engine(dsn):
    engine = build_engine(dsn, 4)
    async with engine.connect() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(insert(Tag), [{"tag": "test", "inactive": False}, {"tag": "retired", "inactive": True}])
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def pool(engine):
    pool = ConnectionPool(engine)
    yield pool
    if not pool.closed:
        await pool.disconnect()


@pytest_asyncio.fixture
async def conn(engine):
    async with engine.connect() as conn:
        yield conn


@pytest.fixture
def statements(engine):
    """Every SQL statement the engine sends, in order."""
    seen = []

    def record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    event.listen(engine.sync_engine, "before_cursor_execute", record)
    yield seen
    event.remove(engine.sync_engine, "before_cursor_execute", record)


@pytest.fixture
def run(conn):
    """Run one page of the given variant on the shared test connection."""
    async def run(page, acting_as=None, priming=False, variant="original"):
        router = get_variant(variant)
        request = Request(acting_as, page, priming)
        return await router.resolve(page.kind)(conn, request.acting_as, request.page, request.is_priming)
    return run
