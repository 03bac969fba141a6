from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

import httpx

from rawej_booking.utils.errors import TransportError, UpstreamError

from .cache import CachePolicy, ResponseCache
from .registry import Fingerprint, RevalidationRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Decoded upstream response; non-2xx statuses are carried, not raised."""

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def raise_for_status(self) -> "TransportResponse":
        if not self.ok:
            raise UpstreamError(self.status_code, self.body)
        return self


@dataclass
class SchedulingHttpClient:
    """
    Thin wrapper around httpx.AsyncClient for the remote scheduling API.

    Tagged GETs are cached and deduplicated through the shared registry.
    """

    registry: RevalidationRegistry = field(default_factory=RevalidationRegistry)
    cache: ResponseCache = field(default_factory=ResponseCache)
    timeout: float = 10.0
    http_client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        self._client: httpx.AsyncClient | None = self.http_client
        self._owns_client = self.http_client is None
        self._background: Set[asyncio.Task] = set()

    async def __aenter__(self) -> "SchedulingHttpClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.aclose()

    async def aclose(self) -> None:
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "SchedulingHttpClient must be used as an async context manager"
            )
        return self._client

    async def execute(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        cache_policy: CachePolicy | None = None,
    ) -> TransportResponse:
        method = method.upper()
        if method != "GET" or cache_policy is None:
            return await self._send(method, url, headers=headers, body=body)

        fingerprint = Fingerprint.of(url, cache_policy.tags)
        if cache_policy.revalidate_seconds > 0:
            entry = self.cache.get(fingerprint)
            if entry is not None:
                if self.cache.is_stale(entry, cache_policy):
                    self._schedule_revalidation(fingerprint, url, headers, cache_policy)
                else:
                    logger.debug("Serving cached response for %s", url)
                return entry.value

        return await self.registry.run(
            fingerprint,
            lambda: self._fetch_and_store(fingerprint, url, headers, cache_policy),
        )

    def invalidate_tag(self, tag: str) -> int:
        return self.cache.invalidate_tag(tag)

    async def wait_for_revalidations(self) -> None:
        """Await background refreshes scheduled so far."""
        if self._background:
            await asyncio.gather(*list(self._background))

    async def _fetch_and_store(
        self,
        fingerprint: Fingerprint,
        url: str,
        headers: Optional[Dict[str, str]],
        cache_policy: CachePolicy,
    ) -> TransportResponse:
        response = await self._send("GET", url, headers=headers)
        if response.ok and cache_policy.revalidate_seconds > 0:
            self.cache.store(fingerprint, response, cache_policy.tags)
        return response

    def _schedule_revalidation(
        self,
        fingerprint: Fingerprint,
        url: str,
        headers: Optional[Dict[str, str]],
        cache_policy: CachePolicy,
    ) -> None:
        if self.registry.is_in_flight(fingerprint):
            return
        logger.debug("Serving stale response for %s, revalidating in background", url)
        task = asyncio.create_task(
            self._revalidate(fingerprint, url, dict(headers or {}), cache_policy)
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _revalidate(
        self,
        fingerprint: Fingerprint,
        url: str,
        headers: Dict[str, str],
        cache_policy: CachePolicy,
    ) -> None:
        try:
            response = await self.registry.run(
                fingerprint,
                lambda: self._fetch_and_store(fingerprint, url, headers, cache_policy),
            )
        except TransportError as exc:
            logger.warning("Background revalidation of %s failed: %s", url, exc)
            return
        except Exception:
            # Nobody awaits this task; the stale entry stays in place
            logger.exception("Background revalidation of %s crashed", url)
            return
        if not response.ok:
            logger.warning(
                "Background revalidation of %s returned status %s; keeping stale response",
                url,
                response.status_code,
            )

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
    ) -> TransportResponse:
        request_headers = {"Accept": "application/json"}
        request_headers.update(headers or {})
        try:
            response = await self.client.request(
                method,
                url,
                headers=request_headers,
                json=body,
            )
        except httpx.RequestError as exc:
            logger.error("Upstream request failed: %s %s - %s", method, url, exc)
            raise TransportError(
                f"Upstream request failed: {method} {url}: {exc}"
            ) from exc

        decoded = _decode_body(response)
        if response.status_code >= 400:
            logger.error(
                "Upstream API error: %s %s - %s", method, url, response.status_code
            )
        return TransportResponse(status_code=response.status_code, body=decoded)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text
