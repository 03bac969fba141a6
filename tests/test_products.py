"""Tests for the consultation products service."""

import pytest

from rawej_booking.domains.products.service import ProductsService, parse_products_response
from rawej_booking.transport.resilient import ResilientClient
from rawej_booking.utils.errors import ConfigError, TransportError, UpstreamError

PRODUCT = {
    "id": 2,
    "slug": "video-consultation",
    "title": "Video Consultation",
    "prices": [
        {"id": 4, "product_id": 2, "title": "60 min", "price": 1200, "discount_percent": 8},
    ],
}


def test_parse_valid_envelope():
    (product,) = parse_products_response({"success": True, "return": {"items": [PRODUCT]}})

    assert product.slug == "video-consultation"
    assert product.prices[0].price == 1200
    assert product.prices[0].discount_percent == "8"


@pytest.mark.parametrize(
    "payload",
    [
        ["not", "an", "envelope"],
        {"success": False, "return": {"items": []}},
        {"success": True, "return": {"items": "nope"}},
        {"success": True},
        {"success": True, "return": {"items": [{"title": "no id"}]}},
    ],
)
def test_parse_rejects_invalid_envelopes(payload):
    with pytest.raises(TransportError):
        parse_products_response(payload)


@pytest.mark.asyncio
async def test_list_for_user_uses_tagged_cache(upstream, resilient_client, transport):
    upstream.json("GET", "/products/meets/doc-1", {"success": True, "return": {"items": [PRODUCT]}})
    service = ProductsService(resilient_client)

    first = await service.list_for_user("doc-1")
    second = await service.list_for_user("doc-1")

    assert first == second
    assert len(upstream.calls("/products/meets/doc-1")) == 1
    assert transport.invalidate_tag("products-doc-1") == 1


@pytest.mark.asyncio
async def test_list_for_user_mock_mode(upstream, resilient_client):
    products = await ProductsService(resilient_client, fallback_enabled=True).list_for_user("doc-1")

    assert [product.slug for product in products] == [
        "chat-consultation",
        "video-consultation",
        "scheduled-phone-consultation",
    ]
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_list_for_user_propagates_upstream_errors(upstream, resilient_client):
    upstream.json("GET", "/products/meets/doc-1", {"message": "down"}, status_code=502)

    with pytest.raises(UpstreamError):
        await ProductsService(resilient_client).list_for_user("doc-1")


@pytest.mark.asyncio
async def test_list_for_user_requires_base_url(transport):
    with pytest.raises(ConfigError):
        await ProductsService(ResilientClient(transport, base_url=None)).list_for_user("doc-1")
