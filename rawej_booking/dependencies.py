"""Request-scoped dependencies for the API layer."""

from __future__ import annotations

from typing import Annotated, Mapping

from fastapi import Depends, Request, Response
from starlette.responses import Response as StarletteResponse

from rawej_booking.core.config import Settings
from rawej_booking.domains.auth.service import AuthService
from rawej_booking.domains.auth.session import (
    CookieSessionBackend,
    FileSessionBackend,
    SessionBackend,
    SessionStore,
)
from rawej_booking.domains.availability.service import AvailabilityService
from rawej_booking.domains.doctors.service import DoctorsService
from rawej_booking.domains.products.service import ProductsService
from rawej_booking.transport.client import SchedulingHttpClient
from rawej_booking.transport.resilient import ResilientClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_transport(request: Request) -> SchedulingHttpClient:
    return request.app.state.transport


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
TransportDep = Annotated[SchedulingHttpClient, Depends(get_transport)]


def build_session_store(
    settings: Settings,
    transport: SchedulingHttpClient,
    cookies: Mapping[str, str],
    response: StarletteResponse | None = None,
) -> SessionStore:
    """
    Session store for one request.

    A configured token file takes precedence over the session cookie; the
    cookie is written to response when one is given.
    """
    backend: SessionBackend
    if settings.token_file is not None:
        backend = FileSessionBackend(settings.token_file)
    else:
        backend = CookieSessionBackend(
            cookies,
            response,
            cookie_name=settings.session_cookie_name,
            max_age=settings.session_ttl_seconds,
            secure=settings.session_cookie_secure,
        )
    identity_url = (
        f"{settings.remote_api_url.rstrip('/')}/auth/me" if settings.remote_api_url else None
    )
    return SessionStore(
        backend,
        transport=transport,
        identity_url=identity_url,
        ttl_seconds=settings.session_ttl_seconds,
    )


def get_session_store(
    request: Request,
    response: Response,
    settings: SettingsDep,
    transport: TransportDep,
) -> SessionStore:
    return build_session_store(settings, transport, request.cookies, response)


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]


def get_resilient_client(
    settings: SettingsDep,
    transport: TransportDep,
    sessions: SessionStoreDep,
) -> ResilientClient:
    return ResilientClient(transport, sessions, base_url=settings.remote_api_url)


ClientDep = Annotated[ResilientClient, Depends(get_resilient_client)]


def get_auth_service(
    settings: SettingsDep, client: ClientDep, sessions: SessionStoreDep
) -> AuthService:
    return AuthService(client, sessions, settings)


def get_availability_service(
    request: Request, settings: SettingsDep, client: ClientDep
) -> AvailabilityService:
    return AvailabilityService(
        client,
        fallback_enabled=settings.enable_mock_fallback,
        revalidate_seconds=settings.api_cache_revalidate,
        events=request.app.state.fallback_events,
    )


def get_doctors_service(settings: SettingsDep, client: ClientDep) -> DoctorsService:
    return DoctorsService(
        client,
        fallback_enabled=settings.enable_mock_fallback,
        revalidate_seconds=settings.api_cache_revalidate,
    )


def get_products_service(settings: SettingsDep, client: ClientDep) -> ProductsService:
    return ProductsService(
        client,
        fallback_enabled=settings.enable_mock_fallback,
        revalidate_seconds=settings.api_cache_revalidate,
    )
