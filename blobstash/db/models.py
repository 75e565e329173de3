"""
@file: models.py
@description:
This file defines the SQLAlchemy ORM model for blobstash: the `entries` table,
which holds every uploaded blob.

@notes:
- The primary key is the entry's ULID, stored as the UUID with the same 128 bits.
- Rows are written once and never updated or deleted by the service.
- `Uuid` maps to the native UUID type on PostgreSQL and to CHAR(32) elsewhere.

@dependencies:
- SQLAlchemy: for defining ORM models.
- blobstash.db.base: provides the Base class (declarative_base).
"""

from sqlalchemy import Column, LargeBinary, Uuid

from blobstash.db.base import Base


class Entry(Base):
    """
    @class Entry
    @description
    A stored blob.

    @attributes:
        id (Uuid): Primary key; the entry's ULID in UUID form.
        value (LargeBinary): The raw uploaded bytes, at most 3 MiB.
    """
    __tablename__ = "entries"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        doc="Entry identifier (ULID bits as a UUID)."
    )
    value = Column(
        LargeBinary,
        nullable=False,
        doc="Opaque payload bytes."
    )
