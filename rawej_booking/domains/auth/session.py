"""Session persistence and validation.

The session is stored as an opaque JSON blob ``{token, user, expiresAt}``
in whatever the hosting environment provides: a cookie, a file, or memory.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Protocol

from pydantic import ValidationError
from starlette.responses import Response

from rawej_booking.transport.client import SchedulingHttpClient
from rawej_booking.utils.errors import TransportError

from .schemas import Session, UserRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthFailure:
    """Outcome of a refresh that could not re-validate the token."""

    reason: str
    status_code: int | None = None


class SessionBackend(Protocol):
    def read(self) -> Optional[str]: ...

    def write(self, blob: str) -> None: ...

    def erase(self) -> None: ...


class MemorySessionBackend:
    def __init__(self, blob: Optional[str] = None) -> None:
        self.blob = blob

    def read(self) -> Optional[str]:
        return self.blob

    def write(self, blob: str) -> None:
        self.blob = blob

    def erase(self) -> None:
        self.blob = None


class FileSessionBackend:
    """Session blob kept in a JSON file (defaults to storage/tokens/auth.json)."""

    def __init__(self, path: Path | str = Path("storage/tokens/auth.json")) -> None:
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not read session file %s: %s", self.path, exc)
            return None

    def write(self, blob: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(blob, encoding="utf-8")

    def erase(self) -> None:
        self.path.unlink(missing_ok=True)


class CookieSessionBackend:
    """
    Session blob carried in an httpOnly cookie.

    Reads come from the incoming request cookies; writes and erasures are set
    on the outgoing response (an erased cookie is expired immediately).
    """

    def __init__(
        self,
        cookies: Mapping[str, str],
        response: Response | None = None,
        *,
        cookie_name: str = "auth-session",
        max_age: int = 3600,
        secure: bool = True,
    ) -> None:
        self._blob: Optional[str] = cookies.get(cookie_name)
        self.response = response
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure

    def read(self) -> Optional[str]:
        return self._blob

    def write(self, blob: str) -> None:
        self._blob = blob
        if self.response is not None:
            self.response.set_cookie(
                self.cookie_name,
                blob,
                max_age=self.max_age,
                httponly=True,
                secure=self.secure,
                samesite="lax",
            )

    def erase(self) -> None:
        self._blob = None
        if self.response is not None:
            self.response.set_cookie(
                self.cookie_name,
                "",
                max_age=0,
                httponly=True,
                secure=self.secure,
                samesite="lax",
            )


class SessionStore:
    """Holds and validates the current session on top of a blob backend."""

    def __init__(
        self,
        backend: SessionBackend,
        *,
        transport: SchedulingHttpClient | None = None,
        identity_url: str | None = None,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.backend = backend
        self._transport = transport
        self._identity_url = identity_url
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def load(self) -> Session | None:
        blob = self.backend.read()
        if not blob:
            return None
        try:
            return Session.model_validate_json(blob)
        except ValidationError as exc:
            logger.warning("Discarding malformed session blob: %s", exc.errors()[:1])
            return None

    def is_valid(self, session: Session | None) -> bool:
        return session is not None and self._now_ms() < session.expires_at

    def save(self, session: Session) -> None:
        self.backend.write(session.to_blob())

    def clear(self) -> None:
        self.backend.erase()

    def issue(
        self, token: str, user: UserRecord, expires_in: int | None = None
    ) -> Session:
        """Create and persist a session for a freshly obtained token."""
        lifetime = expires_in if expires_in and expires_in > 0 else self.ttl_seconds
        session = Session(
            token=token,
            user=user,
            expires_at=self._now_ms() + lifetime * 1000,
        )
        self.save(session)
        return session

    async def refresh(self, session: Session) -> Session | AuthFailure:
        """
        Re-validate the session token against GET /auth/me.

        Returns:
            A session carrying refreshed user data and a renewed expiry, or
            AuthFailure when the identity API rejects the token or is unreachable
        """
        if self._transport is None or not self._identity_url:
            return AuthFailure("identity endpoint is not configured")

        try:
            response = await self._transport.execute(
                self._identity_url,
                "GET",
                headers={"Authorization": f"Bearer {session.token}"},
            )
        except TransportError as exc:
            logger.warning("Session refresh failed: %s", exc)
            return AuthFailure(str(exc), exc.status_code)

        if not response.ok:
            logger.warning("Session refresh rejected with status %s", response.status_code)
            return AuthFailure("identity API rejected the token", response.status_code)

        try:
            user = UserRecord.model_validate(unwrap_user(response.body))
        except ValidationError as exc:
            logger.warning("Identity API returned an unexpected user payload: %s", exc)
            return AuthFailure("identity API returned an unexpected payload")

        logger.info("Session refreshed for user %s", user.id)
        return Session(
            token=session.token,
            user=user,
            expires_at=self._now_ms() + self.ttl_seconds * 1000,
        )


def unwrap_user(body: Any) -> Any:
    if isinstance(body, dict) and isinstance(body.get("user"), dict):
        return body["user"]
    return body
