"""Doctor directory API routes."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Response, status

from rawej_booking.dependencies import SettingsDep, get_doctors_service
from rawej_booking.domains.doctors.schemas import DEFAULT_LIMIT, PaginationParams
from rawej_booking.domains.doctors.service import DoctorsService
from rawej_booking.utils.errors import AuthExpired, ConfigError, TransportError

from .responses import cdn_cached

logger = logging.getLogger(__name__)

router = APIRouter(tags=["doctors"])

DoctorsServiceDep = Annotated[DoctorsService, Depends(get_doctors_service)]


@router.get("/users")
@router.get("/doctors", include_in_schema=False)
async def list_doctors(
    response: Response,
    settings: SettingsDep,
    service: DoctorsServiceDep,
    page: Optional[str] = None,
    limit: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Paginated list of doctors.

    Query values are parsed leniently: page defaults to 1 and limit to 10,
    clamped to 1..100.
    """
    params = PaginationParams.from_query(page, limit)
    try:
        result = await service.list_doctors(params)
    except (ConfigError, TransportError, AuthExpired) as exc:
        logger.error("Failed to list doctors: %s", exc)
        response.status_code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if isinstance(exc, ConfigError)
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        return {
            "success": False,
            "error": str(exc) or "Failed to fetch",
            "items": [],
            "total": 0,
            "page": 1,
            "perPage": DEFAULT_LIMIT,
            "pageCount": 0,
        }

    if result.source == "api":
        cdn_cached(response, settings)
    return result.model_dump(by_alias=True, mode="json")
