"""Tagged response cache with stale-while-revalidate horizons."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Iterable

from .registry import Fingerprint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachePolicy:
    """
    Caching hint attached to a fetch.

    Attributes:
        tags: Invalidation tags; invalidating any of them drops the cached response
        revalidate_seconds: Age after which a cached response is served stale
            while a background refresh runs (0 disables caching)
    """

    tags: FrozenSet[str] = field(default_factory=frozenset)
    revalidate_seconds: int = 300

    def __post_init__(self) -> None:
        if self.revalidate_seconds < 0:
            raise ValueError(
                f"revalidate_seconds must be >= 0, got {self.revalidate_seconds}"
            )
        object.__setattr__(self, "tags", frozenset(self.tags))

    @classmethod
    def tagged(cls, *tags: str, revalidate_seconds: int = 300) -> "CachePolicy":
        return cls(tags=frozenset(tags), revalidate_seconds=revalidate_seconds)


@dataclass
class CacheEntry:
    value: Any
    tags: FrozenSet[str]
    stored_at: float


class ResponseCache:
    """In-memory cache keyed by fingerprint; oldest entries are evicted past max_entries."""

    def __init__(
        self,
        max_entries: int = 512,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[Fingerprint, CacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, fingerprint: Fingerprint) -> CacheEntry | None:
        return self._entries.get(fingerprint)

    def age(self, entry: CacheEntry) -> float:
        return self._clock() - entry.stored_at

    def is_stale(self, entry: CacheEntry, policy: CachePolicy) -> bool:
        return self.age(entry) > policy.revalidate_seconds

    def store(self, fingerprint: Fingerprint, value: Any, tags: Iterable[str]) -> None:
        self._entries.pop(fingerprint, None)
        self._entries[fingerprint] = CacheEntry(
            value=value, tags=frozenset(tags), stored_at=self._clock()
        )
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cached response for %s", evicted.url)

    def invalidate_tag(self, tag: str) -> int:
        """Drop every entry carrying tag. Returns the number of entries removed."""
        doomed = [key for key, entry in self._entries.items() if tag in entry.tags]
        for key in doomed:
            del self._entries[key]
        if doomed:
            logger.info("Invalidated %d cached response(s) tagged %r", len(doomed), tag)
        return len(doomed)
