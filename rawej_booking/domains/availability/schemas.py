from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# "2025-10-18 06:00:00 +0000 UTC" -> offset group "+0000", zone name dropped
_UPSTREAM_SUFFIX = re.compile(r"\s*([+-])(\d{2}):?(\d{2})\s+[A-Z]{2,5}$")


def normalize_timestamp(raw: str) -> str:
    """Rewrite the upstream '<datetime> +0000 UTC' form into an ISO offset string."""
    value = raw.strip()
    match = _UPSTREAM_SUFFIX.search(value)
    if match:
        sign, hours, minutes = match.groups()
        value = f"{value[: match.start()]}{sign}{hours}:{minutes}"
    elif value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return value


def parse_timestamp(raw: str) -> datetime:
    """Parse an upstream timestamp to an aware UTC datetime (naive values are UTC).

    Raises ValueError for unparseable values and for instants that fall outside
    the datetime range once shifted to UTC.
    """
    parsed = datetime.fromisoformat(normalize_timestamp(raw))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return _to_utc(parsed)


def _to_utc(value: datetime) -> datetime:
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"{value.isoformat()} is out of range in UTC") from exc


class MeetingWindow(BaseModel):
    """Raw availability window as produced by the scheduling API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    start: datetime
    end: datetime
    title: Optional[str] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _normalize(cls, value):
        if isinstance(value, str):
            return parse_timestamp(value)
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return _to_utc(value)
        return value


class TimeRange(BaseModel):
    start: str
    end: str
    duration: str = ""


class DateBucket(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date_key: str = Field(..., alias="dateKey")
    label: str
    sub_label: str = Field(default="", alias="subLabel")
    times: List[TimeRange] = Field(default_factory=list)


class FallbackReason(str, Enum):
    FLAG_ENABLED = "flag_enabled"
    UPSTREAM_FAILED = "upstream_failed"
    AUTH_EXPIRED = "auth_expired"
    CONFIG_MISSING = "config_missing"
    MALFORMED_PAYLOAD = "malformed_payload"
    UNEXPECTED = "unexpected"


class AggregationFallback(BaseModel):
    """Degradation event recorded whenever static availability replaces live data."""

    reason: FallbackReason
    detail: str = ""
    dataset_version: str
    entity_uuid: Optional[str] = None
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AvailabilityResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dates: List[DateBucket]
    source: Literal["api", "fallback"] = "api"
    fallback: Optional[AggregationFallback] = None
