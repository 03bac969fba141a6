"""OTP API routes."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response, status

from rawej_booking.dependencies import get_auth_service
from rawej_booking.domains.auth.schemas import OTPSendRequest, OTPVerifyRequest
from rawej_booking.domains.auth.service import AuthService
from rawej_booking.utils.errors import ConfigError, TransportError

from .responses import no_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/otp", tags=["otp"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.post("")
async def send_otp(
    payload: OTPSendRequest, response: Response, service: AuthServiceDep
) -> Dict[str, Any]:
    """Send a one-time password to the given phone number."""
    no_store(response)
    try:
        result = await service.send_otp(payload)
    except ConfigError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    except TransportError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send OTP. Please try again.",
        ) from exc
    return {"success": True, **result.model_dump(by_alias=True, exclude_none=True)}


@router.post("/verify")
async def verify_otp(
    payload: OTPVerifyRequest, response: Response, service: AuthServiceDep
) -> Dict[str, Any]:
    """Verify a one-time password and start a session on success."""
    no_store(response)
    try:
        result = await service.verify_otp(payload)
    except ConfigError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    except TransportError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify OTP. Please try again.",
        ) from exc

    if not result.succeeded:
        logger.warning("OTP verification failed for %s", payload.to)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.status.message or "Invalid OTP",
        )
    return {
        "success": True,
        "message": result.status.message or "Verification successful",
    }
