"""Auth API routes."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse

from rawej_booking.dependencies import (
    SettingsDep,
    TransportDep,
    build_session_store,
    get_auth_service,
)
from rawej_booking.domains.auth.service import AuthService
from rawej_booking.transport.resilient import ResilientClient
from rawej_booking.utils.errors import ConfigError, TransportError

from .responses import no_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.get("/callback")
async def auth_callback(
    request: Request,
    settings: SettingsDep,
    transport: TransportDep,
    token: str | None = None,
    exp: int = 3600,
    lang: str = "",
) -> Response:
    """Exchange a token handed back by the identity provider for a session."""
    if not token:
        logger.warning("No token provided in auth callback")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No token provided"
        )
    try:
        base_url = settings.require_remote_api_url()
    except ConfigError as exc:
        logger.error("Auth callback misconfigured: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error",
        ) from exc

    # Only supported language codes are echoed into the redirect path
    target = f"/{settings.resolve_locale(lang)}" if lang else "/"
    redirect = RedirectResponse(url=target, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    sessions = build_session_store(settings, transport, request.cookies, redirect)
    service = AuthService(
        ResilientClient(transport, sessions, base_url=base_url),
        sessions,
        settings,
    )
    try:
        await service.sign_in(token, exp)
    except (ConfigError, TransportError) as exc:
        logger.warning("Auth callback rejected: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication failed"
        ) from exc

    logger.info("Auth callback successful, session set")
    return redirect


@router.get("/me")
async def current_user(response: Response, service: AuthServiceDep) -> Dict[str, Any]:
    """Return the user of the current session."""
    no_store(response)
    session = service.current_session()
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="No active session"
        )
    return {
        "success": True,
        "user": session.user.model_dump(by_alias=True, exclude_none=True),
        "expiresAt": session.expires_at,
    }


@router.post("/logout")
async def logout(response: Response, service: AuthServiceDep) -> Dict[str, Any]:
    """Clear the current session."""
    no_store(response)
    service.logout()
    return {"success": True, "message": "Logout successful"}
