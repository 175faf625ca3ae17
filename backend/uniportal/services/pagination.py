"""
Pagination utilities for the service layer.

Standardizes the count + slice fetch and the pagination metadata across endpoints.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from pymongo import ASCENDING
from pymongo.collection import Collection

from ..config.constants import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, MAX_PAGE
from ..models.common import PaginationMeta
from .documents import normalize_document
from .query_builder import QueryBuilder


@dataclass
class PaginatedResult:
    """Records for one page plus pagination metadata."""
    data: list[dict] = field(default_factory=list)
    pagination: PaginationMeta | None = None


def clamp_page(page: int | None) -> int:
    return min(max(DEFAULT_PAGE, page or DEFAULT_PAGE), MAX_PAGE)


def clamp_limit(limit: int | None) -> int:
    return max(1, min(limit or DEFAULT_LIMIT, MAX_LIMIT))


def with_tiebreaker(sort: list[tuple[str, int]]) -> list[tuple[str, int]]:
    """Append _id ascending so equal sort keys page reproducibly."""
    if any(key == "_id" for key, _ in sort):
        return list(sort)
    return [*sort, ("_id", ASCENDING)]


def paginate_query(
    collection: Collection,
    qb: QueryBuilder,
    projection: dict[str, Any],
    page: int,
    limit: int,
    row_mapper: Callable[[dict], dict] | None = None,
) -> PaginatedResult:
    """
    Execute count + slice fetch and return a PaginatedResult.

    Args:
        collection: Collection to query
        qb: QueryBuilder with filters and sort applied (pagination is added here)
        projection: Fields returned for each record
        page: Page number (1-indexed, floored at 1)
        limit: Records per page (clamped to [1, MAX_LIMIT])
        row_mapper: Optional transform applied to each document after
                    ObjectId normalization

    Returns:
        PaginatedResult with records and pagination metadata
    """
    page = clamp_page(page)
    limit = clamp_limit(limit)
    qb.paginate(page, limit)

    query = qb.build_filter()
    total = collection.count_documents(query)

    cursor = (
        collection.find(query, projection)
        .sort(with_tiebreaker(qb.build_sort()))
        .skip(qb.skip)
        .limit(limit)
    )

    mapper = row_mapper or (lambda doc: doc)
    data = [mapper(normalize_document(doc)) for doc in cursor]

    return PaginatedResult(
        data=data,
        pagination=PaginationMeta.create(page=page, limit=limit, total=total),
    )
