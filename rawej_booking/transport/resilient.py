"""Auth-aware fetch on top of the scheduling transport.

A fetch attaches the current bearer token, and on a 401 repairs the session
once through the identity API before retrying the original request. The
retry is modelled as a small state machine so a single logical fetch can
never issue more than two upstream calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from rawej_booking.domains.auth.session import AuthFailure, SessionStore
from rawej_booking.utils.errors import AuthExpired, ConfigError, UpstreamError

from .cache import CachePolicy
from .client import SchedulingHttpClient, TransportResponse

logger = logging.getLogger(__name__)


class FetchState(str, Enum):
    INITIAL = "initial"
    AWAITING_REFRESH = "awaiting_refresh"
    RETRIED = "retried"
    FAILED = "failed"


@dataclass
class FetchOptions:
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    params: Optional[Dict[str, Any]] = None
    # Set by authentication bootstrap calls that must not trigger session repair
    skip_auth_retry: bool = False


class ResilientClient:
    """Fetches upstream resources with bearer auth and a one-shot refresh-and-retry."""

    def __init__(
        self,
        transport: SchedulingHttpClient,
        sessions: SessionStore | None = None,
        *,
        base_url: str | None = None,
    ) -> None:
        self._transport = transport
        self._sessions = sessions
        self.base_url = base_url.rstrip("/") if base_url else None
        self.last_state: FetchState | None = None

    def resolve(self, resource: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Build the absolute URL for resource.

        Raises:
            ConfigError: If resource is relative and no base URL is configured
        """
        if resource.startswith(("http://", "https://")):
            url = resource
        else:
            if not self.base_url:
                raise ConfigError("REMOTE_API_URL environment variable is not configured")
            url = f"{self.base_url}/{resource.lstrip('/')}"
        if params:
            url = str(httpx.URL(url).copy_merge_params(
                {key: value for key, value in params.items() if value is not None}
            ))
        return url

    async def fetch(
        self,
        resource: str,
        cache_policy: CachePolicy | None = None,
        options: FetchOptions | None = None,
    ) -> Any:
        """
        Fetch resource and return its decoded body.

        Raises:
            ConfigError: If the upstream base URL is missing
            AuthExpired: If a 401 could not be repaired by refreshing the session
            UpstreamError: For any other non-2xx response
            TransportError: For network failures
        """
        options = options or FetchOptions()
        url = self.resolve(resource, options.params)

        session = self._sessions.load() if self._sessions is not None else None
        credential = session.token if session is not None and self._sessions.is_valid(session) else None
        if session is not None and credential is None:
            logger.debug("Stored session has expired; not sending it as a credential")

        state = FetchState.INITIAL
        while True:
            response = await self._call(url, options, cache_policy, credential)
            if response.ok:
                self.last_state = state
                return response.body

            if (
                state is FetchState.INITIAL
                and response.status_code == 401
                and not options.skip_auth_retry
                and session is not None
            ):
                state = FetchState.AWAITING_REFRESH
                logger.warning("Unauthorized response from %s, refreshing session", url)
                outcome = await self._sessions.refresh(session)
                if isinstance(outcome, AuthFailure):
                    self.last_state = FetchState.FAILED
                    self._sessions.clear()
                    raise AuthExpired(f"Session could not be refreshed: {outcome.reason}")
                self._sessions.save(outcome)
                session, credential = outcome, outcome.token
                state = FetchState.RETRIED
                continue

            self.last_state = FetchState.FAILED
            raise UpstreamError(response.status_code, response.body)

    async def _call(
        self,
        url: str,
        options: FetchOptions,
        cache_policy: CachePolicy | None,
        credential: str | None,
    ) -> TransportResponse:
        headers = {"Content-Type": "application/json", **options.headers}
        if credential and not any(key.lower() == "authorization" for key in headers):
            headers["Authorization"] = f"Bearer {credential}"
        return await self._transport.execute(
            url,
            options.method,
            headers=headers,
            body=options.body,
            cache_policy=cache_policy,
        )
