from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CallType = Literal["phone", "video", "text"]
CALL_TYPES = ("phone", "video", "text")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 100


class Doctor(BaseModel):
    """Doctor listing entry; unknown upstream fields are passed through."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int | str
    uuid: Optional[str] = None
    name: str
    email: Optional[str] = None
    avatar: Optional[str] = None
    image: Optional[str] = None
    specialty: Optional[str] = None
    rating: Optional[float] = None
    bio: Optional[str] = None
    availability: List[str] = Field(default_factory=list)
    call_types: Optional[List[CallType]] = Field(default=None, alias="callTypes")

    @field_validator("call_types", mode="before")
    @classmethod
    def _known_call_types(cls, value: Any) -> Any:
        if value is None:
            return None
        return [item for item in value if item in CALL_TYPES]


class PaginationParams(BaseModel):
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_query(cls, page: Any = None, limit: Any = None) -> "PaginationParams":
        """Parse loosely typed query values, clamping to the allowed ranges."""
        return cls(
            page=max(DEFAULT_PAGE, _to_int(page, DEFAULT_PAGE)),
            limit=min(MAX_LIMIT, max(MIN_LIMIT, _to_int(limit, DEFAULT_LIMIT))),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class DoctorsPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    items: List[Doctor] = Field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    per_page: int = Field(default=DEFAULT_LIMIT, alias="perPage")
    page_count: int = Field(default=0, alias="pageCount")
    source: Literal["api", "mock"] = "api"


def _to_int(value: Any, default: int) -> int:
    # int("") and int("abc") fall back; a literal 0 also falls back like the JS `|| default`
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed or default
