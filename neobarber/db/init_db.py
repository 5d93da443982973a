"""Database initialization utilities."""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from neobarber.db.base import Base
from neobarber.db.session import engine as default_engine

# Register models on the shared metadata
from neobarber import models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create all database tables, including the slot uniqueness constraints."""
    engine = engine or default_engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables(engine: AsyncEngine | None = None) -> None:
    """Drop all database tables (use with caution)."""
    engine = engine or default_engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Database tables dropped")


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Initialize database schema.

    The sequence counter row is not seeded here; the first allocation
    creates it through the upsert.
    """
    await create_tables(engine)
    logger.info("Database initialization complete")
