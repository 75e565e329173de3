"""
Dependency wiring for the request handlers.

The blob store and identifier generator are created once by the application
factory and kept on `app.state`; handlers receive them through these
dependencies rather than importing module-level singletons.
"""

from fastapi import Request

from blobstash.core.ids import IdentifierGenerator
from blobstash.storage.blob_store import BlobStore


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_id_generator(request: Request) -> IdentifierGenerator:
    return request.app.state.id_generator
