"""Static availability used when live data is unavailable or mocking is enabled."""

from __future__ import annotations

from typing import List, Tuple

from .aggregator import AvailabilityAggregator
from .schemas import DateBucket, MeetingWindow

FALLBACK_DATASET_VERSION = "2025.11.1"

# (date, [(start, end), ...]) in UTC, in the order the buckets are served
_STATIC_SLOTS: Tuple[Tuple[str, Tuple[Tuple[str, str], ...]], ...] = (
    ("2025-10-18", (("06:00", "07:00"),)),
    ("2025-10-08", (("06:00", "07:00"),)),
    ("2025-10-25", (("06:00", "07:00"),)),
    ("2025-10-09", (("06:00", "12:00"),)),
    ("2025-11-05", (("07:00", "08:00"),)),
    ("2025-11-20", (("08:00", "09:00"),)),
    ("2025-11-21", (("09:00", "10:00"), ("13:00", "14:00"))),
)


def static_windows() -> List[MeetingWindow]:
    return [
        MeetingWindow(
            start=f"{day} {start}:00 +0000 UTC",
            end=f"{day} {end}:00 +0000 UTC",
        )
        for day, slots in _STATIC_SLOTS
        for start, end in slots
    ]


def build_fallback_buckets(locale: str) -> List[DateBucket]:
    """Static dataset rendered for locale."""
    return AvailabilityAggregator().aggregate(static_windows(), locale)
