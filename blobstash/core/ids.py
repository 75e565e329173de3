"""
@file: ids.py
@description:
Identifier generation and parsing for stored entries.

Identifiers are ULIDs: 128 bits, a 48-bit millisecond timestamp followed by
80 random bits, rendered as 26 Crockford base32 characters. The encoding and
the randomness come from the python-ulid package; this module adds
per-process monotonic ordering and strict parsing.

@dependencies:
- ulid (python-ulid): ULID type, generation and base32 codec

@notes:
- Generation is thread-safe; callers need no locking of their own
- Identifiers from one process are strictly increasing, even within the
  same millisecond or when the wall clock steps backwards
- Entries are stored under the UUID view of the same 128 bits
"""

import re
import threading
import uuid
from typing import Callable, Optional

from ulid import ULID

from blobstash.core.exceptions import BlobstashError

# 26 base32 characters; a leading digit above 7 would overflow 128 bits.
_CANONICAL_PATTERN = re.compile(r"[0-7][0-9A-HJKMNP-TV-Z]{25}", re.IGNORECASE)
_MAX_VALUE = (1 << 128) - 1


class InvalidIdentifierError(BlobstashError, ValueError):
    """Raised when a string is not a canonical identifier."""


class IdentifierGenerator:
    """
    Produces time-sortable identifiers, strictly increasing per process.

    Args:
        factory: Callable returning a fresh ULID; defaults to `ULID`
    """

    def __init__(self, factory: Callable[[], ULID] = ULID):
        self._factory = factory
        self._lock = threading.Lock()
        self._last: Optional[int] = None

    def generate(self) -> ULID:
        with self._lock:
            candidate = int(self._factory())
            if self._last is not None and candidate <= self._last and self._last < _MAX_VALUE:
                candidate = self._last + 1
            self._last = candidate
            return ULID.from_int(candidate)


def parse_identifier(text: str) -> ULID:
    """
    Parse the canonical string form of an identifier.

    Lowercase input is accepted.

    Raises:
        InvalidIdentifierError: If `text` is not a 26-character ULID string
    """
    if not isinstance(text, str) or not _CANONICAL_PATTERN.fullmatch(text):
        raise InvalidIdentifierError(f"malformed identifier: {text!r}")
    try:
        return ULID.from_str(text.upper())
    except ValueError as exc:
        raise InvalidIdentifierError(f"malformed identifier: {text!r}") from exc


def format_identifier(identifier: ULID) -> str:
    return str(identifier)


def to_uuid(identifier: ULID) -> uuid.UUID:
    return uuid.UUID(bytes=bytes(identifier))
