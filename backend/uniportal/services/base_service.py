"""
BaseService: common patterns for domain services.

Domain services inherit from this to get standardized lookups and
paginated listing over a MongoDB collection.
"""
from __future__ import annotations

from typing import Any, Callable

import structlog
from pymongo.collection import Collection

from .documents import normalize_document
from .pagination import PaginatedResult, paginate_query
from .query_builder import QueryBuilder

logger = structlog.get_logger("uniportal.services")


class BaseService:
    """Base class for domain services."""

    def _paginated_list(
        self,
        collection: Collection,
        qb: QueryBuilder,
        projection: dict[str, Any],
        page: int,
        limit: int,
        row_mapper: Callable[[dict], dict] | None = None,
    ) -> PaginatedResult:
        """Execute a paginated list query."""
        return paginate_query(collection, qb, projection, page, limit, row_mapper)

    def _find_one(
        self,
        collection: Collection,
        query: dict[str, Any],
        projection: dict[str, Any] | None = None,
    ) -> dict | None:
        """Execute a query expecting a single document."""
        doc = collection.find_one(query, projection)
        if doc is None:
            logger.debug("find_one_no_match", query=query)
        return normalize_document(doc) if doc is not None else None

    def _find_many(
        self,
        collection: Collection,
        query: dict[str, Any],
        projection: dict[str, Any] | None = None,
        sort: list[tuple[str, int]] | None = None,
        limit: int = 0,
    ) -> list[dict]:
        """Execute a query expecting multiple documents."""
        cursor = collection.find(query, projection)
        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)
        return [normalize_document(doc) for doc in cursor]

    def _aggregate(self, collection: Collection, pipeline: list[dict[str, Any]]) -> list[dict]:
        """Run an aggregation pipeline."""
        rows = [normalize_document(doc) for doc in collection.aggregate(pipeline)]
        logger.debug(
            "aggregate_executed",
            stages=[next(iter(stage)) for stage in pipeline],
            rows=len(rows),
        )
        return rows
