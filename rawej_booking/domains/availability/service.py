from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, List, Optional

from pydantic import ValidationError

from rawej_booking.transport.cache import CachePolicy
from rawej_booking.transport.resilient import FetchOptions, ResilientClient
from rawej_booking.utils.errors import AuthExpired, ConfigError, TransportError

from .aggregator import AvailabilityAggregator
from .fallback import FALLBACK_DATASET_VERSION, build_fallback_buckets
from .schemas import AggregationFallback, AvailabilityResult, FallbackReason

logger = logging.getLogger(__name__)

AVAILABILITY_TAG = "available-slots"


class MalformedPayload(ValueError):
    """Upstream availability body did not contain a list of windows."""


class AvailabilityService:
    """
    Top-level availability lookup.

    get_availability always returns buckets: live data when the scheduling API
    answers with well-formed windows, otherwise the static dataset together
    with the AggregationFallback explaining why.
    """

    def __init__(
        self,
        client: ResilientClient,
        aggregator: AvailabilityAggregator | None = None,
        *,
        fallback_enabled: bool = False,
        revalidate_seconds: int = 300,
        events: Deque[AggregationFallback] | None = None,
    ) -> None:
        self.client = client
        self.aggregator = aggregator or AvailabilityAggregator()
        self.fallback_enabled = fallback_enabled
        self.revalidate_seconds = revalidate_seconds
        # Shared across requests when the app provides one
        self.fallback_events: Deque[AggregationFallback] = (
            events if events is not None else deque(maxlen=100)
        )

    async def get_availability(
        self,
        uuid: str,
        locale: str,
        meeting_type: Optional[str] = None,
    ) -> AvailabilityResult:
        if self.fallback_enabled:
            return self._fallback(uuid, locale, FallbackReason.FLAG_ENABLED, "mock fallback enabled")

        try:
            payload = await self.client.fetch(
                f"/meets/{uuid}/availability",
                cache_policy=CachePolicy.tagged(
                    AVAILABILITY_TAG,
                    f"user-{uuid}",
                    revalidate_seconds=self.revalidate_seconds,
                ),
                options=FetchOptions(params={"type": meeting_type}),
            )
        except ConfigError as exc:
            logger.error("Availability lookup is not configured: %s", exc)
            return self._fallback(uuid, locale, FallbackReason.CONFIG_MISSING, str(exc))
        except AuthExpired as exc:
            return self._fallback(uuid, locale, FallbackReason.AUTH_EXPIRED, str(exc))
        except TransportError as exc:
            logger.error("Failed to fetch availability for %s: %s", uuid, exc)
            return self._fallback(uuid, locale, FallbackReason.UPSTREAM_FAILED, str(exc))
        except Exception as exc:
            logger.exception("Unexpected error fetching availability for %s", uuid)
            return self._fallback(uuid, locale, FallbackReason.UNEXPECTED, repr(exc))

        try:
            buckets = self.aggregator.aggregate(_extract_windows(payload), locale)
        except (MalformedPayload, ValidationError, ValueError, OverflowError) as exc:
            return self._fallback(uuid, locale, FallbackReason.MALFORMED_PAYLOAD, str(exc))
        except Exception as exc:
            logger.exception("Unexpected error aggregating availability for %s", uuid)
            return self._fallback(uuid, locale, FallbackReason.UNEXPECTED, repr(exc))

        logger.info("Availability fetched successfully for %s (%d dates)", uuid, len(buckets))
        return AvailabilityResult(dates=buckets, source="api")

    def _fallback(
        self, uuid: str, locale: str, reason: FallbackReason, detail: str
    ) -> AvailabilityResult:
        event = AggregationFallback(
            reason=reason,
            detail=detail,
            dataset_version=FALLBACK_DATASET_VERSION,
            entity_uuid=uuid,
        )
        self.fallback_events.append(event)
        logger.warning(
            "Serving static availability %s for %s (%s: %s)",
            FALLBACK_DATASET_VERSION,
            uuid,
            reason.value,
            detail,
        )
        return AvailabilityResult(
            dates=build_fallback_buckets(locale),
            source="fallback",
            fallback=event,
        )


def _extract_windows(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("dates", "windows", "meets"):
            if isinstance(payload.get(key), list):
                return payload[key]
    raise MalformedPayload(f"Expected a list of windows, got {type(payload).__name__}")
