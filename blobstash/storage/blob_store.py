"""
@file: blob_store.py
@description:
Write-once persistence of blobs in the `entries` table.

Every operation borrows one pooled connection through an async session and
returns it on completion or failure. Driver and I/O failures are wrapped in
StorageError with the original exception chained, so the HTTP layer can log
the full detail and answer with an opaque 500.

@dependencies:
- sqlalchemy (asyncio): sessions, queries
- blobstash.core.ids: ULID <-> UUID conversion for the primary key
"""

import asyncio
from typing import Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from ulid import ULID

from blobstash.core.exceptions import StorageError
from blobstash.core.ids import to_uuid
from blobstash.core.logger import setup_logger
from blobstash.db.models import Entry

logger = setup_logger("blobstash.storage.blob_store")

_STORE_FAILURES = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class BlobStore:
    """
    Blob store backed by a relational table.

    Args:
        session_factory: Async session factory bound to the pooled engine
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def put(self, entry_id: ULID, value: bytes) -> None:
        """
        Record a new entry.

        The caller guarantees `entry_id` is fresh; writing an existing id fails.

        Raises:
            StorageError: If the row could not be written
        """
        try:
            async with self._session_factory() as session:
                session.add(Entry(id=to_uuid(entry_id), value=value))
                await session.commit()
        except _STORE_FAILURES as exc:
            raise StorageError(f"error while storing entry {entry_id}: {exc}") from exc

        logger.debug(f"Stored entry {entry_id} ({len(value)} bytes)")

    async def get(self, entry_id: ULID) -> Optional[bytes]:
        """
        Fetch the bytes stored under `entry_id`.

        Returns:
            Optional[bytes]: The payload, or None if no such entry exists

        Raises:
            StorageError: If the store could not be queried
        """
        stmt = select(Entry.value).where(Entry.id == to_uuid(entry_id))
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                value = result.scalar_one_or_none()
        except _STORE_FAILURES as exc:
            raise StorageError(f"error while fetching entry {entry_id}: {exc}") from exc

        return None if value is None else bytes(value)

    async def ping(self) -> None:
        """
        Check that the database answers a trivial query.

        Raises:
            StorageError: If the database is unreachable
        """
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except _STORE_FAILURES as exc:
            raise StorageError(f"error while contacting database: {exc}") from exc
