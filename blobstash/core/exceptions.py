"""
@file: exceptions.py
@description:
Error taxonomy for the blobstash service.

- StorageError: any failure talking to the backing store. Logged in full on the
  server, reported to clients only as an opaque 500.
- StartupError: a fault during startup (database unreachable, schema
  preparation failed). Never retried; the process exits non-zero.

Client input errors (malformed identifiers, oversized bodies) are answered
directly by the handlers and have their own types where needed.
"""


class BlobstashError(Exception):
    """Base class for all service errors."""


class StorageError(BlobstashError):
    """Raised when the blob store cannot complete an operation."""


class StartupError(BlobstashError):
    """Raised when the service cannot finish starting up."""
