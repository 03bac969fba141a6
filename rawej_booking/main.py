"""FastAPI application entry point."""

from __future__ import annotations

from collections import deque
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from rawej_booking.api.v1.router import router as api_v1_router
from rawej_booking.core.config import Settings, get_settings
from rawej_booking.core.logging import get_logger, setup_logging
from rawej_booking.middleware.request_logging import RequestLoggingMiddleware
from rawej_booking.transport.cache import ResponseCache
from rawej_booking.transport.client import SchedulingHttpClient
from rawej_booking.transport.registry import RevalidationRegistry

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings; defaults to the cached environment settings
        http_client: Optional pre-built httpx client for upstream calls (tests
            pass one backed by httpx.MockTransport)
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan context manager."""
        logger.info("Starting %s booking API...", settings.app_name)
        async with SchedulingHttpClient(
            registry=app.state.registry,
            cache=app.state.cache,
            timeout=settings.request_timeout,
            http_client=http_client,
        ) as transport:
            app.state.transport = transport
            yield
        logger.info("Shutting down %s booking API...", settings.app_name)

    app = FastAPI(
        title=f"{settings.app_name} Booking API",
        description="Doctor directory, availability and OTP sign-in for the booking frontend",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    # The one intentionally shared piece of mutable state besides the response cache
    app.state.registry = RevalidationRegistry()
    app.state.cache = ResponseCache()
    app.state.fallback_events = deque(maxlen=100)

    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_v1_router)

    @app.get("/healthz")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
