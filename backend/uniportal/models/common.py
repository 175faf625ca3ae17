"""Common Pydantic models for the response envelope and pagination."""
import math
from typing import Any, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for wire models whose JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginationMeta(CamelModel):
    """Pagination metadata accompanying a result slice."""

    page: int = Field(..., description="Current page number (1-indexed)")
    limit: int = Field(..., description="Items per page")
    total: int = Field(..., description="Total number of matching records")
    total_pages: int = Field(..., description="Total number of pages")
    has_next: bool = Field(..., description="Whether a later page has records")
    has_prev: bool = Field(..., description="Whether this is not the first page")

    @classmethod
    def create(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        """Create pagination metadata from parameters.

        Flags are arithmetic and not clamped to total_pages.
        """
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit > 0 else 0,
            has_next=page * limit < total,
            has_prev=page > 1,
        )


class Envelope(CamelModel):
    """Uniform response envelope."""

    status: Literal["success", "error"] = "success"
    message: Optional[str] = None


class ListEnvelope(Envelope, Generic[T]):
    """Envelope carrying a list and its length."""

    data: List[T]
    count: int


class PaginatedEnvelope(ListEnvelope[T], Generic[T]):
    """Envelope carrying a list slice plus pagination metadata."""

    pagination: PaginationMeta
    query: dict[str, Any] = Field(default_factory=dict, description="Filters as received")
