"""
Database initialization.

Creates every table the service needs. Runs once at startup, before the
listener opens; creating tables is idempotent so repeated starts are safe.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from blobstash.core.exceptions import StartupError
from blobstash.core.logger import setup_logger
from blobstash.db import models  # noqa: F401  registers tables on Base.metadata
from blobstash.db.base import Base

logger = setup_logger("blobstash.db.init_db")


async def init_db(engine: AsyncEngine) -> None:
    """
    Initialize the database by creating all tables.

    Raises:
        StartupError: If the schema could not be prepared
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError) as exc:
        raise StartupError("failed to run migrations") from exc

    logger.info("Database schema is ready")
