"""
Main application entry point for the blobstash service.

This module builds the FastAPI application (routes, middleware, exception
handling, lifespan) and runs it under uvicorn.

Startup order:
1. Settings are loaded and validated; invalid configuration exits non-zero.
2. The lifespan connects to the database and prepares the schema before the
   listener binds. Either failing aborts startup; nothing is retried.
3. uvicorn binds the listen address and serves.

On SIGINT or SIGTERM uvicorn stops accepting connections and waits for
in-flight requests to finish before the lifespan disposes of the engine.
"""

import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from blobstash import __version__
from blobstash.api.blobs import preflight
from blobstash.api.blobs import router as blobs_router
from blobstash.core.config import Settings, get_settings
from blobstash.core.exceptions import StartupError, StorageError
from blobstash.core.ids import IdentifierGenerator
from blobstash.core.logger import configure_logging, setup_logger
from blobstash.core.middleware import setup_all_middleware
from blobstash.db.init_db import init_db
from blobstash.db.session import build_engine, build_session_factory
from blobstash.storage.blob_store import BlobStore

logger = setup_logger("blobstash.main")


async def handle_storage_error(request: Request, exc: StorageError) -> PlainTextResponse:
    """Log a storage fault in full and answer with an opaque 500."""
    logger.error(
        f"error while handling request {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return PlainTextResponse("internal server error", status_code=500)


def create_app(settings: Settings, blob_store: Optional[BlobStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Validated application settings
        blob_store: A ready store to use instead of connecting to DATABASE_URL.
            When given, the lifespan does no database work.

    Returns:
        FastAPI: The configured application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if blob_store is None:
            engine = build_engine(
                settings.DATABASE_URL,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_recycle=settings.DB_POOL_RECYCLE,
            )
            store = BlobStore(build_session_factory(engine))
            try:
                try:
                    await store.ping()
                except StorageError as exc:
                    raise StartupError("failed to connect to database") from exc
                await init_db(engine)
            except StartupError as exc:
                logger.critical(f"{exc}: {exc.__cause__}")
                await engine.dispose()
                raise
            app.state.blob_store = store

        try:
            yield
        finally:
            logger.info("exiting…")
            if engine is not None:
                await engine.dispose()

    app = FastAPI(
        title="blobstash",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.id_generator = IdentifierGenerator()
    if blob_store is not None:
        app.state.blob_store = blob_store

    app.add_exception_handler(StorageError, handle_storage_error)
    setup_all_middleware(app, settings)
    app.include_router(blobs_router)
    # Plain Starlette route without a method list: matches every method.
    app.add_route("/{path:path}", preflight, include_in_schema=False)
    return app


class BlobstashServer(uvicorn.Server):
    """uvicorn server that logs the addresses it actually bound."""

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if not self.started:
            return
        for server in self.servers:
            for sock in server.sockets:
                host, port = sock.getsockname()[:2]
                if ":" in host:
                    host = f"[{host}]"
                logger.info(f"listening on http://{host}:{port}")


def build_server(app: FastAPI, settings: Settings) -> uvicorn.Server:
    """
    Create the uvicorn server for `app` on the configured listen address.

    Graceful shutdown waits for in-flight requests without a time limit.
    """
    config = uvicorn.Config(
        app,
        host=settings.listen_host,
        port=settings.listen_port,
        lifespan="on",
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=None,
    )
    return BlobstashServer(config)


def main() -> int:
    """
    Run the service until a termination signal arrives.

    Returns:
        int: Process exit status; non-zero when startup failed
    """
    try:
        settings = get_settings()
    except ValidationError as exc:
        logger.critical(f"invalid configuration: {exc}")
        return 1

    configure_logging(settings.LOG_LEVEL)
    server = build_server(create_app(settings), settings)

    # uvicorn exits through SystemExit when binding or lifespan startup fails.
    try:
        server.run()
    except SystemExit as exc:
        if exc.code in (0, None):
            raise
        logger.critical(f"failed to start server (status {exc.code})")
        return exc.code if isinstance(exc.code, int) else 1

    if not server.started:
        logger.critical("failed to start server")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
