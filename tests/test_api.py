"""Tests for the HTTP API."""

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import make_session
from rawej_booking.core.config import Settings
from rawej_booking.main import create_app

AVAILABILITY_PAYLOAD = {
    "dates": [
        {"start": "2025-10-18 06:00:00 +0000 UTC", "end": "2025-10-18 07:00:00 +0000 UTC"}
    ]
}


def test_health_check(test_client):
    response = test_client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_availability_live(test_client, upstream):
    upstream.json("GET", "/meets/doc-1/availability", AVAILABILITY_PAYLOAD)

    response = test_client.get("/api/v1/users/doc-1/availability", params={"lang": "fa"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store, must-revalidate"
    body = response.json()
    assert body["source"] == "api"
    assert body["fallbackReason"] is None
    assert body["dates"][0]["dateKey"] == "2025-10-18"
    assert body["dates"][0]["subLabel"] == "مهر 1404"


def test_availability_never_fails(test_client, upstream):
    upstream.json("GET", "/meets/doc-1/availability", {"message": "boom"}, status_code=500)

    response = test_client.get("/api/v1/users/doc-1/availability", params={"type": "video"})

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "fallback"
    assert body["fallbackReason"] == "upstream_failed"
    assert len(body["dates"]) == 7
    assert test_client.app.state.fallback_events[-1].entity_uuid == "doc-1"


def test_doctors_list_is_cdn_cacheable(test_client, upstream):
    upstream.json(
        "GET",
        "/doctors",
        {"success": True, "return": {"items": [{"id": 1, "name": "Dr. A"}], "total": 1}},
    )

    response = test_client.get("/api/v1/users", params={"page": "1", "limit": "5"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == (
        "public, s-maxage=300, stale-while-revalidate=600"
    )
    body = response.json()
    assert body["success"] is True
    assert body["perPage"] == 1
    assert body["items"][0]["name"] == "Dr. A"


def test_doctors_list_upstream_failure_is_500(test_client, upstream):
    upstream.json("GET", "/doctors", {"message": "down"}, status_code=502)

    response = test_client.get("/api/v1/users")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["items"] == []
    assert body["perPage"] == 10


def test_doctors_list_without_configuration_is_503(upstream):
    settings = Settings(_env_file=None, remote_api_url=None, session_cookie_secure=False)
    app = create_app(settings, http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)))

    with TestClient(app) as client:
        response = client.get("/api/v1/users")

    assert response.status_code == 503
    assert "not configured" in response.json()["error"]


def test_doctors_mock_mode(settings, upstream):
    settings = settings.model_copy(update={"enable_mock_fallback": True})
    app = create_app(settings, http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)))

    with TestClient(app) as client:
        response = client.get("/api/v1/doctors", params={"limit": "2"})

    body = response.json()
    assert body["source"] == "mock"
    assert body["pageCount"] == 2
    assert upstream.requests == []


def test_me_without_session_is_401(test_client):
    response = test_client.get("/api/v1/auth/me")

    assert response.status_code == 401


def test_me_with_expired_session_is_401(test_client):
    test_client.cookies.set("auth-session", make_session(expires_in=-1).to_blob())

    response = test_client.get("/api/v1/auth/me")

    assert response.status_code == 401


def test_callback_sets_session_and_redirects(test_client, upstream):
    upstream.json("GET", "/auth/me", {"id": "user-1", "name": "Test User"})

    response = test_client.get(
        "/api/v1/auth/callback",
        params={"token": "tok-1", "exp": "600", "lang": "fa"},
        follow_redirects=False,
    )

    assert response.status_code == 307
    assert response.headers["location"] == "/fa"
    assert "auth-session" in response.cookies

    me = test_client.get("/api/v1/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["id"] == "user-1"


def test_callback_unknown_language_falls_back(test_client, upstream):
    upstream.json("GET", "/auth/me", {"id": "user-1"})

    response = test_client.get(
        "/api/v1/auth/callback",
        params={"token": "tok-1", "lang": "/evil.example"},
        follow_redirects=False,
    )

    assert response.headers["location"] == "/en"


def test_callback_without_token_is_400(test_client):
    response = test_client.get("/api/v1/auth/callback", follow_redirects=False)

    assert response.status_code == 400


def test_callback_with_rejected_token_is_401(test_client, upstream):
    upstream.json("GET", "/auth/me", {"message": "invalid"}, status_code=401)

    response = test_client.get(
        "/api/v1/auth/callback", params={"token": "bad"}, follow_redirects=False
    )

    assert response.status_code == 401


def test_logout_clears_cookie(test_client):
    test_client.cookies.set("auth-session", make_session().to_blob())

    response = test_client.post("/api/v1/auth/logout")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert "Max-Age=0" in response.headers["set-cookie"]


def test_otp_send(test_client, upstream):
    upstream.json("POST", "/otp", {"success": True, "otpId": "otp-7"})

    response = test_client.post(
        "/api/v1/otp", json={"to": "9121234567", "countryCode": "+98", "language": "fa"}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "otpId": "otp-7"}


def test_otp_send_rejects_bad_phone(test_client, upstream):
    response = test_client.post("/api/v1/otp", json={"to": "12", "countryCode": "+98"})

    assert response.status_code == 422
    assert upstream.requests == []


def test_otp_send_upstream_failure_is_500(test_client, upstream):
    upstream.json("POST", "/otp", {"message": "down"}, status_code=503)

    response = test_client.post("/api/v1/otp", json={"to": "9121234567", "countryCode": "+98"})

    assert response.status_code == 500


def test_otp_verify_success_starts_session(test_client, upstream):
    upstream.json(
        "POST",
        "/otp/verify",
        {"status": {"code": 0, "message": "Welcome"}, "accessToken": "access-1", "expiresIn": 600},
    )
    upstream.json("GET", "/auth/me", {"id": "user-3"})

    response = test_client.post(
        "/api/v1/otp/verify", json={"to": "9121234567", "code": "1234", "countryCode": "+98"}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Welcome"}
    assert test_client.get("/api/v1/auth/me").json()["user"]["id"] == "user-3"


def test_otp_verify_wrong_code_is_401(test_client, upstream):
    upstream.json("POST", "/otp/verify", {"status": {"code": 7, "message": "Invalid OTP"}})

    response = test_client.post(
        "/api/v1/otp/verify", json={"to": "9121234567", "code": "1234", "countryCode": "+98"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid OTP"


@pytest.mark.parametrize("secret", [None, "wrong"])
def test_revalidate_rejects_bad_secret(test_client, secret):
    params = {"tag": "doctors"} if secret is None else {"tag": "doctors", "secret": secret}

    response = test_client.get("/api/v1/revalidate", params=params)

    assert response.status_code == 401


def test_revalidate_drops_tagged_responses(test_client, upstream):
    upstream.json("GET", "/doctors", {"success": True, "return": {"items": []}})
    test_client.get("/api/v1/users")
    test_client.get("/api/v1/users")
    assert len(upstream.calls("/doctors")) == 1

    response = test_client.get("/api/v1/revalidate", params={"secret": "s3cret", "tag": "doctors"})
    test_client.get("/api/v1/users")

    assert response.status_code == 200
    assert response.json()["dropped"] == 1
    assert len(upstream.calls("/doctors")) == 2


def test_requests_are_logged(test_client, caplog):
    with caplog.at_level("INFO", logger="rawej_booking.middleware.request_logging"):
        test_client.get("/api/v1/auth/me")
        test_client.get("/healthz")

    messages = [
        record.getMessage()
        for record in caplog.records
        if record.name == "rawej_booking.middleware.request_logging"
    ]
    assert len(messages) == 1
    assert messages[0].startswith("GET /api/v1/auth/me -> 401")


def test_products_for_user(test_client, upstream):
    upstream.json(
        "GET",
        "/products/meets/doc-1",
        {"success": True, "return": {"items": [{"id": 1, "slug": "chat", "title": "Chat"}]}},
    )

    response = test_client.get("/api/v1/products/doc-1")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store, must-revalidate"
    assert response.json()[0]["slug"] == "chat"


def test_products_invalid_envelope_is_500(test_client, upstream):
    upstream.json("GET", "/products/meets/doc-1", {"success": False})

    response = test_client.get("/api/v1/products/doc-1")

    assert response.status_code == 500
    assert response.json()["success"] is False


def test_products_without_configuration_is_503(upstream):
    settings = Settings(_env_file=None, remote_api_url=None, session_cookie_secure=False)
    app = create_app(settings, http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)))

    with TestClient(app) as client:
        response = client.get("/api/v1/products/doc-1")

    assert response.status_code == 503
    assert "not configured" in response.json()["error"]
