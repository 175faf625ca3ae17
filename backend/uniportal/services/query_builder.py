"""
QueryBuilder: fluent MongoDB filter and sort construction.

Translates optional request filters into a filter document and a sort
specification. User text is regex-escaped before it reaches $regex, so
filters are plain case-insensitive substring matches.
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any

from pymongo import ASCENDING, DESCENDING

from ..config.constants import (
    DEFAULT_SORT_FIELD,
    FIELD_CITY,
    FIELD_COUNTRY,
    FIELD_NAME,
    FIELD_SHORT_NAME,
    FIELD_STATUS,
    FIELD_TYPE,
    SORT_FIELDS,
)

SortSpec = list[tuple[str, int]]


def clean(value: str | None) -> str | None:
    """Strip a text parameter; empty or whitespace-only means absent."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def contains(value: str) -> dict[str, str]:
    """Case-insensitive substring match on a literal value."""
    return {"$regex": re.escape(value), "$options": "i"}


@dataclass(frozen=True)
class SearchFilters:
    """Optional search filters as received from the request."""

    search: str | None = None
    country: str | None = None
    city: str | None = None
    name: str | None = None
    type: str | None = None
    status: str | None = None

    def as_dict(self) -> dict[str, str | None]:
        return asdict(self)

    def present(self) -> dict[str, str]:
        """Filters that carry a value, stripped; blanks count as absent."""
        cleaned = {key: clean(value) for key, value in self.as_dict().items()}
        return {key: value for key, value in cleaned.items() if value is not None}


class QueryBuilder:
    """Fluent MongoDB query builder. Conditions are combined with AND."""

    def __init__(self):
        self._conditions: list[dict[str, Any]] = []
        self._sort: SortSpec = []
        self._limit: int | None = None
        self._skip: int | None = None

    # --- Generic where ---

    def where(self, condition: dict[str, Any]) -> QueryBuilder:
        """Add a raw filter condition."""
        self._conditions.append(condition)
        return self

    # --- Filters ---

    def filter_text(self, search: str | None) -> QueryBuilder:
        """Full-text relevance search against the text index."""
        search = clean(search)
        if search:
            self._conditions.append({"$text": {"$search": search}})
        return self

    def filter_contains(self, value: str | None, field: str) -> QueryBuilder:
        """Case-insensitive substring match on one field."""
        value = clean(value)
        if value:
            self._conditions.append({field: contains(value)})
        return self

    def filter_contains_any(self, value: str | None, fields: list[str]) -> QueryBuilder:
        """Case-insensitive substring match on any of several fields (OR)."""
        value = clean(value)
        if value and fields:
            self._conditions.append({"$or": [{f: contains(value)} for f in fields]})
        return self

    # --- Sorting ---

    def sort(
        self,
        field: str | None,
        order: str | None = "asc",
        whitelist: dict[str, str] | None = None,
        default: SortSpec | None = None,
    ) -> QueryBuilder:
        """
        Set a single-key sort from a whitelisted public field name.

        Args:
            field: User-provided sort field name
            order: 'asc' or 'desc' (case-insensitive); anything else is asc
            whitelist: Maps public field names to document paths
            default: Sort used when field is None or not in whitelist
        """
        direction = DESCENDING if order and order.lower() == "desc" else ASCENDING
        if field and whitelist and field in whitelist:
            self._sort = [(whitelist[field], direction)]
        elif default:
            self._sort = list(default)
        return self

    # --- Pagination ---

    def paginate(self, page: int, limit: int) -> QueryBuilder:
        """Set skip/limit for a 1-indexed page."""
        self._limit = limit
        self._skip = (page - 1) * limit
        return self

    # --- Build methods ---

    def build_filter(self) -> dict[str, Any]:
        """Combine conditions into one filter document.

        Conditions are merged into a flat document; $and is used only when two
        conditions share a key. An empty filter matches every record.
        """
        query: dict[str, Any] = {}
        for condition in self._conditions:
            if any(key in query for key in condition):
                return {"$and": list(self._conditions)}
            query.update(condition)
        return query

    def build_sort(self) -> SortSpec:
        return list(self._sort)

    @property
    def skip(self) -> int:
        return self._skip or 0

    @property
    def limit(self) -> int | None:
        return self._limit


def build_search_query(filters: SearchFilters) -> QueryBuilder:
    """Translate search filters into a QueryBuilder with conditions applied.

    Precedence rule: when ``search`` is present, ``name`` is ignored and the
    text index covers name matching.
    """
    qb = QueryBuilder()
    qb.filter_text(filters.search)
    qb.filter_contains(filters.country, FIELD_COUNTRY)
    qb.filter_contains(filters.city, FIELD_CITY)
    if not clean(filters.search):
        qb.filter_contains_any(filters.name, [FIELD_NAME, FIELD_SHORT_NAME])
    qb.filter_contains(filters.type, FIELD_TYPE)
    qb.filter_contains(filters.status, FIELD_STATUS)
    return qb


def apply_sort(qb: QueryBuilder, sort_by: str | None, sort_order: str | None = "asc") -> QueryBuilder:
    """Apply the public sort field; unknown or absent fields sort by name ascending."""
    return qb.sort(
        sort_by,
        sort_order,
        whitelist=SORT_FIELDS,
        default=[(SORT_FIELDS[DEFAULT_SORT_FIELD], ASCENDING)],
    )


def build_sort_options(sort_by: str | None, sort_order: str | None = "asc") -> SortSpec:
    """Single-key sort spec for a public sort field and direction."""
    return apply_sort(QueryBuilder(), sort_by, sort_order).build_sort()
