"""
Storage Package for blobstash.

This package holds the blob store: write-once persistence of opaque byte
payloads keyed by identifier.
"""

from blobstash.storage.blob_store import BlobStore

__all__ = ["BlobStore"]
