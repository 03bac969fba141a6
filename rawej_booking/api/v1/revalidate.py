"""On-demand cache revalidation."""

from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, status

from rawej_booking.dependencies import SettingsDep, TransportDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["revalidate"])


@router.get("/revalidate")
async def revalidate(
    settings: SettingsDep,
    transport: TransportDep,
    secret: Optional[str] = None,
    tag: str = "doctors",
) -> Dict[str, Any]:
    """Drop every cached upstream response carrying tag."""
    expected = settings.revalidate_secret
    if not expected or not secret or not secrets.compare_digest(secret, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    dropped = transport.invalidate_tag(tag)
    logger.info("Revalidated tag %s (%d cached responses dropped)", tag, dropped)
    return {
        "revalidated": True,
        "now": int(time.time() * 1000),
        "tag": tag,
        "dropped": dropped,
    }
