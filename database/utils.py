from __future__ import annotations
from typing import Any, Iterable

from sqlalchemy import insert, select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncConnection

from database.keystore import Keystore
from database.story import Story
from errors import ConfigurationError, IntegrityFault, InvalidIdentifier


# ───────────────────────────────  IDENTIFIERS  ────────────────────────────
def short_id(raw: bytes | bytearray | str) -> str:
    """Decode an external short id (stories and comments are addressed by these)."""
    if isinstance(raw, str):
        return raw
    if not isinstance(raw, (bytes, bytearray)):
        raise InvalidIdentifier(f"short id {raw!r} is neither bytes nor str")
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidIdentifier(f"short id {raw!r} is not valid UTF-8") from e


def username(uid: int) -> str:
    return f"user{uid}"


def keystore_key(uid: int, counter: str) -> str:
    return f"user:{uid}:{counter}"


def acting_user(acting_as: int | None, page: str) -> int:
    if acting_as is None:
        raise IntegrityFault(f"/{page} requires a logged-in user")
    return acting_as


def required(row: Any, what: str):
    """Rows the workload guarantees exist; a miss means priming went wrong."""
    if row is None:
        raise IntegrityFault(f"{what} not found")
    return row


def ids(rows: Iterable[Any], column: str) -> set[int]:
    return {getattr(r, column) for r in rows}


# ───────────────────────────────  STORIES  ────────────────────────────────
async def get_story(conn: AsyncConnection, sid: bytes | str):
    res = await conn.execute(select(Story).where(Story.short_id == short_id(sid)))
    return required(res.first(), f"story {short_id(sid)}")


# ───────────────────────────────  KEYSTORES  ──────────────────────────────
async def increment_counter(conn: AsyncConnection, key: str) -> None:
    """INSERT the counter at 1, or bump it by one if the key already exists."""
    dialect = conn.dialect.name
    if dialect == "mysql":
        stmt = mysql.insert(Keystore).values(key=key, value=1)
        stmt = stmt.on_duplicate_key_update(value=Keystore.value + 1)
    elif dialect in ("postgresql", "sqlite"):
        ins = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = ins(Keystore).values(key=key, value=1).on_conflict_do_update(
            index_elements=[Keystore.key], set_={"value": Keystore.value + 1}
        )
    else:
        raise ConfigurationError(f"no keystore upsert for dialect {dialect!r}")
    await conn.execute(stmt)


async def read_counter(conn: AsyncConnection, key: str):
    res = await conn.execute(select(Keystore).where(Keystore.key == key))
    return res.first()


async def insert_row(conn: AsyncConnection, model, **values) -> int:
    res = await conn.execute(insert(model).values(**values))
    return res.inserted_primary_key[0]
