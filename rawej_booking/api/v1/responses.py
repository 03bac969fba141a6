"""Cache-Control helpers shared by the v1 routes."""

from __future__ import annotations

from starlette.responses import Response

from rawej_booking.core.config import Settings

NO_STORE = "no-store, must-revalidate"


def no_store(response: Response) -> Response:
    response.headers["Cache-Control"] = NO_STORE
    response.headers["Vary"] = "*"
    return response


def cdn_cached(response: Response, settings: Settings) -> Response:
    response.headers["Cache-Control"] = (
        f"public, s-maxage={settings.cdn_max_age}, "
        f"stale-while-revalidate={settings.cdn_stale_while_revalidate}"
    )
    return response
