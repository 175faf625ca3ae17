"""
Request parameter validation.

Dependencies here run before any handler body, so a rejected request never
reaches the query translator or the store. Each violated constraint raises
InvalidParameterError with its own message.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Query

from .config.constants import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_SORT_FIELD,
    MAX_LENGTHS,
    MAX_LIMIT,
    MAX_PAGE,
    SORT_FIELDS,
    SORT_ORDERS,
    SUGGEST_DEFAULT_LIMIT,
    SUGGEST_MAX_LIMIT,
)
from .middleware.error_handler import InvalidParameterError
from .services.query_builder import SearchFilters

LABELS = {
    "search": "Search query",
    "name": "Name query",
    "country": "Country query",
    "city": "City query",
    "type": "Type query",
    "status": "Status query",
    "q": "Suggestion query",
}


def check_length(field: str, value: Optional[str]) -> Optional[str]:
    """Reject text parameters longer than the field's cap."""
    limit = MAX_LENGTHS[field]
    if value is not None and len(value) > limit:
        raise InvalidParameterError(f"{LABELS[field]} too long (max {limit} characters)")
    return value


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer query value; None when absent, ValueError when not numeric."""
    if value is None or value.strip() == "":
        return None
    return int(value.strip())


@dataclass(frozen=True)
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: str = DEFAULT_SORT_FIELD
    sort_order: str = "asc"


def search_filters(
    search: Optional[str] = Query(None, description="Full-text search (takes precedence over name)"),
    country: Optional[str] = Query(None, description="Country substring"),
    city: Optional[str] = Query(None, description="City substring"),
    name: Optional[str] = Query(None, description="Name or short name substring"),
    institution_type: Optional[str] = Query(None, alias="type", description="Institution type substring"),
    status: Optional[str] = Query(None, description="Institution status substring"),
) -> SearchFilters:
    """Validate and collect the search filters."""
    return SearchFilters(
        search=check_length("search", search),
        name=check_length("name", name),
        country=check_length("country", country),
        city=check_length("city", city),
        type=check_length("type", institution_type),
        status=check_length("status", status),
    )


def page_params(
    page: Optional[str] = Query(None, description="Page number (1-indexed)"),
    limit: Optional[str] = Query(None, description=f"Records per page (1-{MAX_LIMIT})"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Sort field"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
) -> PageParams:
    """Validate pagination and sorting parameters."""
    try:
        page_num = parse_int(page)
    except ValueError:
        raise InvalidParameterError("Invalid page number")
    if page_num is not None and not 1 <= page_num <= MAX_PAGE:
        raise InvalidParameterError("Invalid page number")

    try:
        limit_num = parse_int(limit)
    except ValueError:
        raise InvalidParameterError(f"Invalid limit (must be between 1 and {MAX_LIMIT})")
    if limit_num is not None and not 1 <= limit_num <= MAX_LIMIT:
        raise InvalidParameterError(f"Invalid limit (must be between 1 and {MAX_LIMIT})")

    if sort_by and sort_by not in SORT_FIELDS:
        raise InvalidParameterError(
            f"Invalid sort field. Valid options: {', '.join(SORT_FIELDS)}"
        )
    if sort_order and sort_order.lower() not in SORT_ORDERS:
        raise InvalidParameterError("Invalid sort order (must be asc or desc)")

    return PageParams(
        page=page_num or DEFAULT_PAGE,
        limit=limit_num or DEFAULT_LIMIT,
        sort_by=sort_by or DEFAULT_SORT_FIELD,
        sort_order=(sort_order or "asc").lower(),
    )


def suggest_limit(
    limit: Optional[str] = Query(None, description=f"Max suggestions (clamped to 1-{SUGGEST_MAX_LIMIT})"),
) -> int:
    """Parse the suggestion cap; integers are clamped, anything else is rejected."""
    try:
        value = parse_int(limit)
    except ValueError:
        raise InvalidParameterError("Invalid limit (must be an integer)")
    if value is None:
        return SUGGEST_DEFAULT_LIMIT
    return max(1, min(value, SUGGEST_MAX_LIMIT))
