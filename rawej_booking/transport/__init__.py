"""Cache-aware, deduplicating HTTP transport for the remote scheduling API."""

from .cache import CachePolicy, ResponseCache
from .client import SchedulingHttpClient, TransportResponse
from .registry import Fingerprint, RevalidationRegistry

__all__ = [
    "CachePolicy",
    "Fingerprint",
    "ResponseCache",
    "RevalidationRegistry",
    "SchedulingHttpClient",
    "TransportResponse",
]
