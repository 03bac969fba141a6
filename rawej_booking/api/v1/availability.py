"""Availability API routes."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response

from rawej_booking.dependencies import SettingsDep, get_availability_service
from rawej_booking.domains.availability.service import AvailabilityService

from .responses import no_store

router = APIRouter(tags=["availability"])

AvailabilityServiceDep = Annotated[AvailabilityService, Depends(get_availability_service)]


@router.get("/users/{uuid}/availability")
@router.get("/doctors/{uuid}/availability", include_in_schema=False)
async def get_availability(
    uuid: str,
    response: Response,
    settings: SettingsDep,
    service: AvailabilityServiceDep,
    meeting_type: Optional[str] = Query(default=None, alias="type"),
    lang: Optional[str] = None,
) -> Dict[str, Any]:
    """Available dates for a user, grouped per day; never fails."""
    no_store(response)
    result = await service.get_availability(
        uuid, settings.resolve_locale(lang), meeting_type=meeting_type
    )
    return result.model_dump(by_alias=True, mode="json", exclude={"fallback"}) | {
        "fallbackReason": result.fallback.reason.value if result.fallback else None,
    }
