"""Process-wide record of in-flight upstream fetches.

Concurrent callers asking for the same fingerprint (url + cache tags) share a
single network round-trip: the first caller claims the fingerprint and performs
the call, later callers join and await its outcome.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, NamedTuple, Tuple, TypeVar

from rawej_booking.utils.errors import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Fingerprint(NamedTuple):
    url: str
    tags: Tuple[str, ...] = ()

    @classmethod
    def of(cls, url: str, tags: Iterable[str] = ()) -> "Fingerprint":
        return cls(url, tuple(sorted(set(tags))))


@dataclass
class InFlight:
    """Outcome slot shared by the claimant and every joiner of a fingerprint."""

    event: asyncio.Event = field(default_factory=asyncio.Event)
    result: Any = None
    error: BaseException | None = None

    def resolve(self, result: Any = None, error: BaseException | None = None) -> None:
        self.result = result
        self.error = error
        self.event.set()

    async def wait(self) -> Any:
        await self.event.wait()
        if self.error is not None:
            raise self.error
        return self.result


@dataclass(frozen=True)
class Ticket:
    proceed: bool
    entry: InFlight


class RevalidationRegistry:
    """Claim-or-join map of fingerprints with a call currently in flight."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[Fingerprint, InFlight] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def is_in_flight(self, fingerprint: Fingerprint) -> bool:
        with self._lock:
            return fingerprint in self._entries

    def begin_or_join(self, fingerprint: Fingerprint) -> Ticket:
        """
        Claim the fingerprint or join the call already holding it.

        Returns:
            Ticket with proceed=True when the caller must perform the call and
            later invoke complete(); proceed=False when it should await
            ticket.entry.wait() instead.
        """
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is not None:
                return Ticket(proceed=False, entry=entry)
            entry = InFlight()
            self._entries[fingerprint] = entry
            return Ticket(proceed=True, entry=entry)

    def complete(
        self,
        fingerprint: Fingerprint,
        result: Any = None,
        error: BaseException | None = None,
    ) -> None:
        """Drop the in-flight marker and hand the outcome to every joiner."""
        with self._lock:
            entry = self._entries.pop(fingerprint, None)
        if entry is not None:
            entry.resolve(result, error)

    async def run(self, fingerprint: Fingerprint, call: Callable[[], Awaitable[T]]) -> T:
        """Perform call() once per concurrent fingerprint; complete() runs on every exit path."""
        ticket = self.begin_or_join(fingerprint)
        if not ticket.proceed:
            logger.debug("Joining in-flight request for %s", fingerprint.url)
            return await ticket.entry.wait()

        try:
            result = await call()
        except asyncio.CancelledError:
            self.complete(
                fingerprint,
                error=TransportError(f"In-flight request for {fingerprint.url} was abandoned"),
            )
            raise
        except BaseException as exc:
            self.complete(fingerprint, error=exc)
            raise
        self.complete(fingerprint, result=result)
        return result
