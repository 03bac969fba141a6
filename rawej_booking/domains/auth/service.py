"""Service for authentication business logic."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from rawej_booking.core.config import Settings, get_settings
from rawej_booking.transport.resilient import FetchOptions, ResilientClient
from rawej_booking.utils.errors import TransportError, UpstreamError

from .schemas import (
    OTPSendRequest,
    OTPSendResponse,
    OTPVerifyRequest,
    OTPVerifyResponse,
    Session,
    UserRecord,
)
from .session import SessionStore, unwrap_user

logger = logging.getLogger(__name__)


class AuthService:
    """Identity API operations and session lifecycle."""

    def __init__(
        self,
        client: ResilientClient,
        sessions: SessionStore,
        settings: Settings | None = None,
    ):
        self.client = client
        self.sessions = sessions
        self.settings = settings or get_settings()

    async def fetch_user(self, token: str) -> UserRecord:
        """
        Fetch the user a token belongs to from /auth/me.

        Raises:
            ConfigError: If the identity API URL is not configured
            TransportError: If the identity API rejects the token or is unreachable
        """
        body = await self.client.fetch(
            "/auth/me",
            options=FetchOptions(
                headers={"Authorization": f"Bearer {token}"},
                skip_auth_retry=True,
            ),
        )
        try:
            user = UserRecord.model_validate(unwrap_user(body))
        except ValidationError as exc:
            raise UpstreamError(200, body) from exc
        logger.info("User info fetched successfully for user: %s", user.id)
        return user

    async def validate_token(self, token: str) -> bool:
        try:
            await self.fetch_user(token)
        except TransportError as exc:
            logger.warning("Token validation failed: %s", exc)
            return False
        return True

    async def sign_in(self, token: str, expires_in: int | None = None) -> Session:
        """Resolve the token's user and persist a new session for it."""
        user = await self.fetch_user(token)
        session = self.sessions.issue(token, user, expires_in)
        logger.info("Session issued for user %s", user.id)
        return session

    def current_session(self) -> Session | None:
        session = self.sessions.load()
        if session is None:
            return None
        if not self.sessions.is_valid(session):
            logger.warning("Session expired for user %s", session.user.id)
            return None
        return session

    def logout(self) -> None:
        self.sessions.clear()
        logger.info("Logout successful, session cleared")

    def normalize_language(self, language: str | None) -> str:
        return self.settings.resolve_locale(language)

    async def send_otp(self, data: OTPSendRequest) -> OTPSendResponse:
        """
        Send a one-time password via POST /otp.

        Raises:
            ConfigError: If the identity API URL is not configured
            TransportError: If the OTP request fails
        """
        payload = data.model_copy(update={"language": self.normalize_language(data.language)})
        logger.debug("Sending OTP to %s with country code %s", payload.to, payload.country_code)
        try:
            body = await self.client.fetch(
                "/otp",
                options=FetchOptions(
                    method="POST",
                    body=payload.model_dump(by_alias=True),
                    skip_auth_retry=True,
                ),
            )
        except TransportError as exc:
            logger.error("OTP send failed for %s: %s", payload.to, exc)
            raise
        logger.info("OTP sent successfully to %s", payload.to)
        return OTPSendResponse.model_validate(body or {})

    async def verify_otp(self, data: OTPVerifyRequest) -> OTPVerifyResponse:
        """
        Verify a one-time password via POST /otp/verify and sign in on success.

        Raises:
            ConfigError: If the identity API URL is not configured
            TransportError: If verification or the follow-up user lookup fails
        """
        logger.debug("Verifying OTP for %s with code length %d", data.to, len(data.code))
        try:
            body = await self.client.fetch(
                "/otp/verify",
                options=FetchOptions(
                    method="POST",
                    body=data.model_dump(by_alias=True),
                    skip_auth_retry=True,
                ),
            )
        except TransportError as exc:
            logger.error("OTP verification failed for %s: %s", data.to, exc)
            raise

        try:
            result = OTPVerifyResponse.model_validate(body)
        except ValidationError as exc:
            raise UpstreamError(200, body) from exc

        logger.info(
            "OTP verification %s for %s. Status: %s - %s",
            "successful" if result.succeeded else "failed",
            data.to,
            result.status.code,
            result.status.message,
        )
        if result.succeeded:
            await self.sign_in(result.access_token, result.expires_in)
        return result
