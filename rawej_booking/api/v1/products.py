"""Consultation product API routes."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, List, Union

from fastapi import APIRouter, Depends, Response, status

from rawej_booking.dependencies import get_products_service
from rawej_booking.domains.products.service import ProductsService
from rawej_booking.utils.errors import AuthExpired, ConfigError, TransportError

from .responses import no_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])

ProductsServiceDep = Annotated[ProductsService, Depends(get_products_service)]


@router.get("/products/{uuid}")
async def list_products(
    uuid: str,
    response: Response,
    service: ProductsServiceDep,
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    """Products (meeting types and prices) for a doctor's meetings."""
    no_store(response)
    try:
        products = await service.list_for_user(uuid)
    except (ConfigError, TransportError, AuthExpired) as exc:
        logger.error("Failed to fetch products for %s: %s", uuid, exc)
        response.status_code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if isinstance(exc, ConfigError)
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        return {"success": False, "error": str(exc) or "Failed to fetch products"}

    return [product.model_dump(mode="json") for product in products]
