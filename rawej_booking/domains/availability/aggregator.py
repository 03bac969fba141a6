from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List

from .calendars import format_label
from .schemas import DateBucket, MeetingWindow, TimeRange

logger = logging.getLogger(__name__)


def _clock(value: datetime) -> str:
    return value.strftime("%H:%M")


def _duration(window: MeetingWindow) -> str:
    minutes = int((window.end - window.start).total_seconds() // 60)
    return f"{max(minutes, 0)}m"


class AvailabilityAggregator:
    """
    Groups meeting windows into per-day buckets.

    Buckets are keyed by the UTC date of each window's start instant and are
    emitted in the order their dates first appear in the input. Times inside a
    bucket keep input order as well.
    """

    def to_windows(self, raw_windows: Iterable[Any]) -> List[MeetingWindow]:
        """Validate raw upstream records (raises pydantic.ValidationError)."""
        return [
            item if isinstance(item, MeetingWindow) else MeetingWindow.model_validate(item)
            for item in raw_windows
        ]

    def aggregate(self, raw_windows: Iterable[Any], locale: str) -> List[DateBucket]:
        windows = self.to_windows(raw_windows)
        grouped: Dict[str, List[TimeRange]] = {}
        first_dates: Dict[str, datetime] = {}

        for window in windows:
            key = window.start.date().isoformat()
            if key not in grouped:
                grouped[key] = []
                first_dates[key] = window.start
            grouped[key].append(
                TimeRange(
                    start=_clock(window.start),
                    end=_clock(window.end),
                    duration=_duration(window),
                )
            )

        buckets = []
        for key, times in grouped.items():
            label = format_label(first_dates[key].date(), locale)
            buckets.append(
                DateBucket(
                    date_key=key,
                    label=label.text,
                    sub_label=label.sub_text,
                    times=times,
                )
            )

        logger.debug("Aggregated %d windows into %d buckets", len(windows), len(buckets))
        return buckets
