from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductPrice(BaseModel):
    """One price option of a consultation product."""

    model_config = ConfigDict(extra="allow")

    id: int
    product_id: Optional[int] = None
    title: str
    price: float
    discount_amount: float = 0
    discount_percent: str = "0"
    currency: Optional[str] = None

    @field_validator("discount_percent", mode="before")
    @classmethod
    def _percent_as_text(cls, value: Any) -> Any:
        # Upstream sends "8"; older payloads sent a bare number
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class Product(BaseModel):
    """Meeting type a doctor offers, with its price options."""

    model_config = ConfigDict(extra="allow")

    id: int
    slug: str
    title: str
    title_en: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    display_rank: Optional[int] = None
    prices: List[ProductPrice] = Field(default_factory=list)
