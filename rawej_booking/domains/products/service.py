from __future__ import annotations

import logging
from typing import Any, List

from pydantic import ValidationError

from rawej_booking.transport.cache import CachePolicy
from rawej_booking.transport.resilient import ResilientClient
from rawej_booking.utils.errors import TransportError

from .mocks import MOCK_PRODUCTS
from .schemas import Product

logger = logging.getLogger(__name__)

PRODUCTS_TAG = "products"


class ProductsService:
    """Consultation products offered for a doctor's meetings."""

    def __init__(
        self,
        client: ResilientClient,
        *,
        fallback_enabled: bool = False,
        revalidate_seconds: int = 300,
    ) -> None:
        self.client = client
        self.fallback_enabled = fallback_enabled
        self.revalidate_seconds = revalidate_seconds

    async def list_for_user(self, uuid: str) -> List[Product]:
        """
        Fetch the products of a doctor's meetings from /products/meets/{uuid}.

        Raises:
            ConfigError: If REMOTE_API_URL is not configured
            TransportError: If the upstream request fails or returns a bad envelope
        """
        if self.fallback_enabled:
            logger.info("Returning mock products (ENABLE_MOCK_FALLBACK=true)")
            return [Product.model_validate(item) for item in MOCK_PRODUCTS]

        data = await self.client.fetch(
            f"/products/meets/{uuid}",
            cache_policy=CachePolicy.tagged(
                PRODUCTS_TAG,
                f"products-{uuid}",
                revalidate_seconds=self.revalidate_seconds,
            ),
        )
        products = parse_products_response(data)
        logger.info("Fetched %d products for meet %s", len(products), uuid)
        return products


def parse_products_response(data: Any) -> List[Product]:
    """
    Validate the ``{success, return: {items}}`` envelope.

    Unlike the doctor directory this is strict: a payload the booking form
    cannot price from raises TransportError.
    """
    if not isinstance(data, dict):
        raise _invalid("Invalid response format from products API", data)
    if not data.get("success"):
        raise _invalid("Products API returned an unsuccessful response", data)
    envelope = data.get("return")
    items = envelope.get("items") if isinstance(envelope, dict) else None
    if not isinstance(items, list):
        raise _invalid(
            f"Expected products items to be a list, got {type(items).__name__}", data
        )
    try:
        return [Product.model_validate(item) for item in items]
    except ValidationError as exc:
        raise _invalid(f"Malformed product entry: {exc.errors()[:1]}", data) from exc


def _invalid(message: str, payload: Any) -> TransportError:
    logger.error(message)
    return TransportError(message, status_code=200, payload=payload)
