import json

import pytest
from sqlalchemy import select

from database.story import Story
from driver import Dispatcher, replay
from endpoints.pages import Frontpage, Login, Request, StoryVote, Submit, Vote
from errors import ConfigurationError, IntegrityFault


@pytest.mark.asyncio
async def test_dispatcher_runs_requests_in_order_with_one_connection(dsn, engine):
    dispatcher = Dispatcher(dsn, "original", 1)
    try:
        await dispatcher.submit(Request(1, Login(), True))
        await dispatcher.submit(Request(2, Login(), True))
        await dispatcher.submit(Request(1, Submit(b"abc12", "hi"), True))
        await dispatcher.submit(Request(2, StoryVote(b"abc12", Vote.UP)))
        await dispatcher.submit(Request(2, Frontpage()))
        await dispatcher.drain()
    finally:
        await dispatcher.shutdown()

    assert (dispatcher.completed, dispatcher.dropped) == (5, 0)
    async with engine.connect() as conn:
        story = (await conn.execute(select(Story))).one()
    assert story.upvotes == 2


@pytest.mark.asyncio
async def test_fatal_error_stops_the_run(dsn, engine):
    dispatcher = Dispatcher(dsn, "noria", 2)
    try:
        await dispatcher.submit(Request(2, StoryVote(b"gh0st", Vote.UP)))
        with pytest.raises(IntegrityFault):
            await dispatcher.drain()
        with pytest.raises(IntegrityFault):
            await dispatcher.submit(Request(2, Login()))
    finally:
        await dispatcher.shutdown()
    assert dispatcher.completed == 0


@pytest.mark.asyncio
async def test_requests_after_shutdown_are_dropped(dsn, engine):
    dispatcher = Dispatcher(dsn, "original", 2)
    await dispatcher.shutdown()

    await dispatcher.submit(Request(1, Login()))
    await dispatcher.drain()
    assert (dispatcher.completed, dispatcher.dropped) == (0, 1)


@pytest.mark.asyncio
async def test_replay_trace(dsn, engine, tmp_path):
    trace = tmp_path / "trace.jsonl"
    records = [
        {"user": 1, "page": "login", "priming": True},
        {"user": 1, "page": "submit", "story": "abc12", "title": "hi", "priming": True},
        {"user": 1, "page": "comment", "story": "abc12", "comment": "c0001"},
        {"user": None, "page": "story", "story": "abc12"},
        {"user": None, "page": "user", "uid": 1},
    ]
    trace.write_text("\n".join(json.dumps(r) for r in records) + "\n\n")

    dispatcher = Dispatcher(dsn, "original", 1)
    try:
        assert await replay(dispatcher, str(trace)) == 5
        await dispatcher.drain()
    finally:
        await dispatcher.shutdown()
    assert dispatcher.completed == 5


@pytest.mark.asyncio
async def test_replay_rejects_bad_records(dsn, engine, tmp_path):
    trace = tmp_path / "trace.jsonl"
    trace.write_text('{"user": 1, "page": "teleport"}\n')

    dispatcher = Dispatcher(dsn, "original", 1)
    try:
        with pytest.raises(ConfigurationError):
            await replay(dispatcher, str(trace))
    finally:
        await dispatcher.shutdown()


def test_unknown_variant_fails_before_connecting(dsn):
    with pytest.raises(ConfigurationError):
        Dispatcher(dsn, "natural", 1)
