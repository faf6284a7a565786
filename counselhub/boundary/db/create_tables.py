"""
Schema bootstrap for the portal tables.

Dependencies: sqlalchemy, counselhub.configs
System role: Database schema initialization

Usage:
    counselhub-create-tables
    python -m counselhub.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from counselhub.boundary.db.base import Base
from counselhub.boundary.db.connection import get_async_engine

# Registers every model on Base.metadata
import counselhub.boundary.db.models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create any missing tables. Existing tables are left untouched.

    Args:
        engine: Target engine; the configured application engine by default
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created", extra={"tables": sorted(Base.metadata.tables)})


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """Drop every portal table and its data. Development only."""
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("All tables dropped")


def main() -> None:
    from counselhub.observability.logger import configure_logging

    configure_logging()
    asyncio.run(create_all_tables())


if __name__ == "__main__":
    main()
