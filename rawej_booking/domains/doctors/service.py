from __future__ import annotations

import logging
import math
from typing import Any, Dict, List

from pydantic import ValidationError

from rawej_booking.transport.cache import CachePolicy
from rawej_booking.transport.resilient import FetchOptions, ResilientClient

from .mocks import MOCK_DOCTORS
from .schemas import Doctor, DoctorsPage, PaginationParams

logger = logging.getLogger(__name__)


class DoctorsService:
    """Paginated doctor directory backed by the remote API or static mocks."""

    def __init__(
        self,
        client: ResilientClient,
        *,
        fallback_enabled: bool = False,
        revalidate_seconds: int = 300,
    ) -> None:
        self.client = client
        self.fallback_enabled = fallback_enabled
        self.revalidate_seconds = revalidate_seconds

    async def list_doctors(self, params: PaginationParams | None = None) -> DoctorsPage:
        """
        Return one page of doctors.

        Raises:
            ConfigError: If REMOTE_API_URL is not configured
            TransportError: If the upstream request fails
        """
        params = params or PaginationParams()
        logger.debug("Listing doctors - page: %s, limit: %s", params.page, params.limit)

        if self.fallback_enabled:
            logger.info("Returning mock data (ENABLE_MOCK_FALLBACK=true)")
            return mock_page(params)

        data = await self.client.fetch(
            "/doctors",
            cache_policy=CachePolicy.tagged(
                "doctors",
                f"doctors-page-{params.page}",
                revalidate_seconds=self.revalidate_seconds,
            ),
            options=FetchOptions(params={"page": params.page, "limit": params.limit}),
        )
        logger.info("Doctors fetched successfully from external API (page: %s)", params.page)
        return parse_doctors_response(data, params)


def mock_page(params: PaginationParams) -> DoctorsPage:
    doctors = [Doctor.model_validate(item) for item in MOCK_DOCTORS]
    return DoctorsPage(
        items=doctors[params.offset : params.offset + params.limit],
        total=len(doctors),
        page=params.page,
        per_page=params.limit,
        page_count=math.ceil(len(doctors) / params.limit),
        source="mock",
    )


def parse_doctors_response(data: Any, fallback: PaginationParams) -> DoctorsPage:
    """
    Parse the upstream ``{success, return: {items, total, page, perPage, pageCount}}``
    envelope. Missing or mistyped fields are derived from the items and the
    requested pagination.
    """
    if not isinstance(data, dict) or "success" not in data or "return" not in data:
        logger.warning("Doctors response has an unexpected shape; returning an empty page")
        return DoctorsPage(page=fallback.page, per_page=fallback.limit)

    envelope: Dict[str, Any] = data["return"] if isinstance(data["return"], dict) else {}
    raw_items = envelope.get("items")
    items = _parse_items(raw_items if isinstance(raw_items, list) else [])

    total = _as_int(envelope.get("total"), len(items))
    per_page = _as_int(envelope.get("perPage"), len(items))
    page_count = _as_int(
        envelope.get("pageCount"),
        math.ceil(total / per_page) if per_page else 0,
    )

    return DoctorsPage(
        items=items,
        total=total,
        page=_as_int(envelope.get("page"), fallback.page),
        per_page=per_page,
        page_count=page_count,
        source="api",
    )


def _parse_items(raw_items: List[Any]) -> List[Doctor]:
    doctors = []
    for item in raw_items:
        try:
            doctors.append(Doctor.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed doctor entry: %s", exc.errors()[:1])
    return doctors


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value
