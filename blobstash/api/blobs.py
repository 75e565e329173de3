"""
@file: blobs.py
@description:
HTTP endpoints for uploading and retrieving blobs.

Routes:
- POST /      : store the request body, answer with its new identifier
- GET /{id}   : answer with the stored bytes
- anything else (notably OPTIONS): empty success, so CORS preflights pass

@notes:
- An oversized upload is answered with 200 and an error-typed JSON body, not
  a 4xx; clients inspect the body. Existing clients depend on this.
- Retrieved blobs are immutable, so they are served with a one-year
  immutable cache header.
- Storage failures propagate as StorageError to the application's exception
  handler, which logs them and answers with an opaque 500.
- The Access-Control-Allow-Origin header is added by middleware.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from blobstash.api.dependencies import get_blob_store, get_id_generator
from blobstash.core.ids import (
    IdentifierGenerator,
    InvalidIdentifierError,
    format_identifier,
    parse_identifier,
)
from blobstash.core.logger import setup_logger
from blobstash.storage.blob_store import BlobStore

# Create a component-specific logger
logger = setup_logger("blobstash.api.blobs")

MAX_UPLOAD = 3 * 1024 * 1024
CACHE_FOREVER = {"Cache-Control": "max-age=31536000, immutable"}

router = APIRouter()


async def read_body(request: Request, limit: int) -> Optional[bytes]:
    """
    Buffer the request body, giving up once it exceeds `limit` bytes.

    Returns:
        Optional[bytes]: The body, or None if it is larger than `limit`
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        return None

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            return None
    return bytes(body)


@router.post("/", include_in_schema=False)
async def upload(
    request: Request,
    store: BlobStore = Depends(get_blob_store),
    id_generator: IdentifierGenerator = Depends(get_id_generator),
) -> Response:
    """
    POST /

    Stores the raw request body (at most 3 MiB) as a new entry.

    Example Response:
    {"id": "01J9ZQ6D1T6V5Q8P3Y0M7W2K4E"}
    """
    body = await read_body(request, MAX_UPLOAD)
    if body is None:
        logger.debug("Rejected upload larger than the size cap")
        return JSONResponse({"error_class": "RequestTooLargeError"})

    entry_id = id_generator.generate()
    await store.put(entry_id, body)

    return JSONResponse({"id": format_identifier(entry_id)})


@router.get("/{entry_id}", include_in_schema=False)
async def retrieve(
    entry_id: str,
    store: BlobStore = Depends(get_blob_store),
) -> Response:
    """
    GET /{entry_id}

    Returns the stored bytes. 400 for a malformed identifier, 404 for an
    unknown one.
    """
    try:
        parsed = parse_identifier(entry_id)
    except InvalidIdentifierError:
        return Response(status_code=400)

    value = await store.get(parsed)
    if value is None:
        return Response(status_code=404)

    return Response(
        content=value,
        media_type="application/octet-stream",
        headers=CACHE_FOREVER,
    )


async def preflight(request: Request) -> Response:
    """
    Catch-all for every method and path not handled above.

    Registered on the application as a plain Starlette route with no method
    list, after the router, so any method (including nonstandard ones such as
    PROPFIND) on any path reaches it.

    Answers with an empty success so cross-origin preflights succeed without
    a route per resource. This includes e.g. DELETE /{id}.
    """
    return Response(headers=CACHE_FOREVER)
