"""Centralized exception classes for the booking data layer."""

from __future__ import annotations

from typing import Any

from fastapi import status


class ConfigError(RuntimeError):
    """Raised when required configuration is missing."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class TransportError(RuntimeError):
    """Raised when an upstream call fails at the network level or with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class UpstreamError(TransportError):
    """Raised when the upstream API answers with a non-2xx status."""

    def __init__(self, status_code: int, payload: Any | None = None) -> None:
        super().__init__(
            f"Upstream API request failed with status {status_code}",
            status_code=status_code,
            payload=payload,
        )


class AuthExpired(RuntimeError):
    """Raised when the session could not be repaired after a 401."""

    status_code = status.HTTP_401_UNAUTHORIZED
