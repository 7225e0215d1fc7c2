# database/schema.py
from __future__ import annotations

import logging
from importlib import resources

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from config import parse_dsn
from errors import ConfigurationError, SchemaError

# database each backend connects to while the target is dropped and recreated
ADMIN_DATABASE = {
    "mysql": None,
    "postgresql": "postgres",
}


def load_schema(name: str, backend: str = "mysql") -> str:
    """Return the DDL asset for a variant.

    MySQL assets are ``database/schema/<name>.sql``, other backends ship
    ``<name>.<backend>.sql`` next to them.
    """
    filename = f"{name}.sql" if backend == "mysql" else f"{name}.{backend}.sql"
    asset = resources.files("database").joinpath("schema").joinpath(filename)
    if not asset.is_file():
        raise ConfigurationError(f"no {backend} schema asset for variant {name!r}")
    return asset.read_text(encoding="utf-8")


def split_statements(schema: str) -> list[str]:
    """Cut a DDL script into statements.

    Comment lines (``--``) and blank lines are skipped, the remaining lines are
    joined with a space, and a statement ends on a line ending with ``;``.
    """
    statements: list[str] = []
    current = ""
    for line in schema.splitlines():
        line = line.rstrip()
        if not line or line.startswith("--"):
            continue
        current = f"{current} {line}" if current else line
        if current.endswith(";"):
            statements.append(current)
            current = ""
    return statements


def single_connection_engine(url: URL) -> AsyncEngine:
    return create_async_engine(url, pool_size=1, max_overflow=0, isolation_level="AUTOCOMMIT")


async def run_script(engine: AsyncEngine, statements: list[str]) -> None:
    """Send ``statements`` in order on one connection, then dispose the engine."""
    try:
        async with engine.connect() as c:
            for stmt in statements:
                await c.exec_driver_sql(stmt)
    finally:
        await engine.dispose()


async def prime_schema(dsn: str, schema: str) -> None:
    """Drop and recreate the target database, then load the variant's DDL.

    Runs on its own single-connection engines, so it must finish before the
    benchmark pool is created. MySQL does everything on one connection with no
    database selected and switches with ``USE``. PostgreSQL has no ``USE``: the
    database is recreated from the ``postgres`` maintenance database and the
    DDL is loaded over a second connection to the new one.
    """
    url = parse_dsn(dsn)
    db = url.database
    backend = url.get_backend_name()
    if not db:
        raise ConfigurationError(f"connection string {dsn!r} names no database")
    if backend not in ADMIN_DATABASE:
        raise ConfigurationError(f"cannot prime a {backend!r} database")

    statements = split_statements(load_schema(schema, backend))
    admin = single_connection_engine(url.set(database=ADMIN_DATABASE[backend]))
    quoted = admin.dialect.identifier_preparer.quote(db)
    recreate = [f"DROP DATABASE IF EXISTS {quoted}", f"CREATE DATABASE {quoted}"]
    try:
        if backend == "mysql":
            await run_script(admin, recreate + [f"USE {quoted}"] + statements)
        else:
            await run_script(admin, recreate)
            await run_script(single_connection_engine(url), statements)
    except SQLAlchemyError as e:
        raise SchemaError(f"failed to load {schema!r} schema into {db}: {e}") from e
    logging.info("✅ %s schema loaded into %s (%d statements)", schema, db, len(statements))
