# prime_db.py
import asyncio
import logging

from config import DSN, LOG_LEVEL, VARIANT
from database.schema import prime_schema
from endpoints import get_variant


async def create() -> None:
    """Drop and recreate the benchmark database with the configured variant's schema."""
    router = get_variant(VARIANT)
    await prime_schema(DSN, router.schema)


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL)
    asyncio.run(create())
