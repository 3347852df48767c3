"""Base schemas: the listing request and the paginated response envelope.

These are shared by every listing endpoint.
"""

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from listing_api.models.schemas.validators import (
    coerce_positive_int,
    normalize_search_term,
    normalize_sort_direction,
    normalize_sort_field,
)

T = TypeVar("T")


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class PageRequest(BaseModel):
    """Pagination, filtering and sorting parameters for a listing call."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "page": 1,
                "limit": 20,
                "filters": {"status": "active"},
                "sort_field": "created_at",
                "sort_direction": "desc",
            }
        },
    )

    page: Optional[int] = Field(
        default=None,
        description="Page number (starts from 1)",
    )
    limit: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("limit", "page_size", "pageSize", "per_page"),
        description="Items per page; clamped to the listing's maximum",
    )
    filters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Field name to exact value, substring, or {from, to} range",
    )
    sort_field: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "sort_field", "sortField", "sort", "sort_by", "sortBy", "order_by", "orderBy"
        ),
        description="Sort field; falls back to the listing default when not sortable",
    )
    sort_direction: Optional[SortDirection] = Field(
        default=None,
        validation_alias=AliasChoices(
            "sort_direction", "sortDirection", "order", "sort_order", "sortOrder"
        ),
        description="asc or desc (default desc)",
    )
    search: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("search", "q"),
        description="Free-text term matched against the listing's searchable fields",
    )

    @field_validator("page", "limit", mode="before")
    @classmethod
    def coerce_paging(cls, v: Any) -> Optional[int]:
        return coerce_positive_int(v)

    @field_validator("sort_direction", mode="before")
    @classmethod
    def coerce_direction(cls, v: Any) -> Optional[str]:
        return normalize_sort_direction(v)

    @field_validator("sort_field", mode="before")
    @classmethod
    def coerce_sort_field(cls, v: Any) -> Optional[str]:
        return normalize_sort_field(v)

    @field_validator("filters", mode="before")
    @classmethod
    def default_filters(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("search", mode="before")
    @classmethod
    def validate_search(cls, v: Any) -> Optional[str]:
        if v is not None and not isinstance(v, str):
            v = str(v)
        return normalize_search_term(v)


class Pagination(BaseModel):
    """Pagination metadata for a returned page."""

    current: int = Field(..., description="Effective page number")
    limit: int = Field(..., description="Effective page size")
    records: int = Field(..., description="Total rows matching the filters")
    pages: int = Field(..., description="Total number of pages")


class Page(BaseModel, Generic[T]):
    """One page of summary records."""

    pagination: Pagination
    data: List[T] = Field(default_factory=list)
