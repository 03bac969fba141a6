"""Request logging middleware for the booking API."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and latency of every API request."""

    def __init__(self, app: ASGIApp, exclude_paths: list[str] | None = None):
        """
        Initialize request logging middleware.

        Args:
            app: ASGI application
            exclude_paths: List of path prefixes to exclude from logging (e.g., ['/healthz'])
        """
        super().__init__(app)
        self.exclude_paths = exclude_paths or ["/healthz", "/docs", "/openapi.json", "/redoc"]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        response_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            "%s %s -> %s (%dms)",
            request.method,
            request.url.path,
            response.status_code,
            response_time_ms,
        )
        return response
