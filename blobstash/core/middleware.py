"""
@file: middleware.py
@description:
This module configures and centralizes middleware for the blobstash application.

The middleware components include:
- Admission control: caps the number of requests processed at once; excess
  requests wait for a free slot instead of being rejected
- CORS origin header: stamps the configured allow-origin on every response
- Request logging: logs each request with its status and processing time

@dependencies:
- fastapi / starlette: For BaseHTTPMiddleware and ASGI types
- blobstash.core.config: For application settings
- blobstash.core.logger: For structured logging

@notes:
- Order, outermost first: request logging, CORS origin, admission control
- The admission semaphore is independent of the database connection pool; a
  request can hold a slot while it waits for a connection
"""

import asyncio
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from blobstash.core.config import Settings
from blobstash.core.logger import log_request_details, setup_logger

# Create a component-specific logger
logger = setup_logger("blobstash.core.middleware")


class ConcurrencyLimitMiddleware:
    """
    ASGI middleware that admits at most `limit` requests into the application at once.

    Requests beyond the limit suspend on a semaphore until a slot frees up,
    which gives backpressure instead of load shedding. The slot is held until
    the wrapped application has sent the whole response and is released
    however the request ends, including when the handler raises.
    """

    def __init__(self, app: ASGIApp, limit: int):
        if limit < 1:
            raise ValueError("concurrency limit must be at least 1")
        self.app = app
        self.limit = limit
        self._semaphore = asyncio.Semaphore(limit)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async with self._semaphore:
            await self.app(scope, receive, send)


class AllowOriginMiddleware(BaseHTTPMiddleware):
    """
    Middleware that sets Access-Control-Allow-Origin on every response.

    Unlike a full CORS implementation it does not depend on the request's
    Origin header and never answers preflights itself; those fall through to
    the application's catch-all route. Faults no exception handler claimed
    are logged and answered here with an opaque 500, so that response carries
    the header too.
    """

    def __init__(self, app: ASGIApp, origin: str):
        super().__init__(app)
        self.origin = origin

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"error while handling request {request.method} {request.url.path}: {exc}",
                exc_info=exc,
            )
            response = PlainTextResponse("internal server error", status_code=500)
        response.headers["Access-Control-Allow-Origin"] = self.origin
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging requests and their processing time.

    Processing time covers the wait for an admission slot.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time
        log_request_details(logger, request, process_time, response.status_code)
        return response


def setup_admission_control(app: FastAPI, limit: int) -> None:
    logger.info(f"Admitting at most {limit} concurrent requests")
    app.add_middleware(ConcurrencyLimitMiddleware, limit=limit)


def setup_cors(app: FastAPI, origin: str) -> None:
    logger.info(f"Allowing cross-origin requests from {origin}")
    app.add_middleware(AllowOriginMiddleware, origin=origin)


def setup_request_logging(app: FastAPI) -> None:
    app.add_middleware(RequestLoggingMiddleware)


def setup_all_middleware(app: FastAPI, settings: Settings) -> None:
    """
    Configure and add all middleware to the application.

    Starlette wraps later additions around earlier ones, so the innermost
    middleware is added first.

    Args:
        app: The FastAPI application instance
        settings: Validated application settings
    """
    setup_admission_control(app, settings.CONCURRENCY)
    setup_cors(app, settings.CORS_ORIGIN)
    setup_request_logging(app)
