"""
University domain service.

Handles search, suggestions, detail lookup and the country/city catalogs.
Router stays thin: parse request → call service → return response.
"""
from __future__ import annotations

import re

import structlog
from bson import ObjectId
from pymongo.collection import Collection

from ..config.constants import (
    FIELD_CITY,
    FIELD_COUNTRY,
    FIELD_IAU_ID,
    FIELD_NAME,
    FIELD_SHORT_NAME,
    OBJECT_ID_PATTERN,
    SUGGEST_DEFAULT_LIMIT,
    SUGGEST_MAX_LIMIT,
    SUGGEST_MIN_QUERY_LENGTH,
    SUGGEST_PROJECTION,
    SUMMARY_PROJECTION,
)
from .base_service import BaseService
from .documents import nonblank_sorted
from .pagination import PaginatedResult
from .query_builder import QueryBuilder, SearchFilters, apply_sort, build_search_query, clean

logger = structlog.get_logger("uniportal.services.university")

_OBJECT_ID_RE = re.compile(OBJECT_ID_PATTERN)


def is_native_id(identifier: str) -> bool:
    """True when the identifier has the store's native id format."""
    return bool(_OBJECT_ID_RE.match(identifier))


def detail_query(identifier: str) -> dict:
    """Native ids resolve by _id; everything else by IAU id."""
    if is_native_id(identifier):
        return {"_id": ObjectId(identifier)}
    return {FIELD_IAU_ID: identifier}


class UniversityService(BaseService):
    """Business logic for university queries."""

    def search(
        self,
        collection: Collection,
        filters: SearchFilters,
        *,
        page: int = 1,
        limit: int = 20,
        sort_by: str | None = None,
        sort_order: str | None = "asc",
    ) -> PaginatedResult:
        """Filtered, sorted, paginated search with summary projection."""
        qb = apply_sort(build_search_query(filters), sort_by, sort_order)
        result = self._paginated_list(collection, qb, SUMMARY_PROJECTION, page, limit)
        logger.debug(
            "search_executed",
            total=result.pagination.total,
            returned=len(result.data),
            page=result.pagination.page,
        )
        return result

    def suggest(
        self,
        collection: Collection,
        q: str | None,
        limit: int = SUGGEST_DEFAULT_LIMIT,
    ) -> list[dict]:
        """Type-ahead matches on name or short name.

        Queries shorter than the minimum return [] without touching the store.
        """
        q = clean(q)
        if not q or len(q) < SUGGEST_MIN_QUERY_LENGTH:
            return []
        limit = max(1, min(limit, SUGGEST_MAX_LIMIT))
        query = QueryBuilder().filter_contains_any(q, [FIELD_NAME, FIELD_SHORT_NAME]).build_filter()
        return self._find_many(collection, query, SUGGEST_PROJECTION, limit=limit)

    def get_detail(self, collection: Collection, identifier: str) -> dict | None:
        """Full record by native id or IAU id, or None."""
        return self._find_one(collection, detail_query(identifier))

    def list_countries(self, collection: Collection) -> list[str]:
        """Sorted distinct non-blank country names."""
        return nonblank_sorted(collection.distinct(FIELD_COUNTRY))

    def list_cities(self, collection: Collection, country: str | None = None) -> list[str]:
        """Sorted distinct non-blank city names, optionally within matching countries."""
        query = QueryBuilder().filter_contains(country, FIELD_COUNTRY).build_filter()
        return nonblank_sorted(collection.distinct(FIELD_CITY, query))


# Singleton instance
university_service = UniversityService()
