"""
Statistics service: grouping and counting aggregations over the full record set.

Dataset scale is small enough that every call aggregates from scratch;
responses are memoized by the router's response cache.
"""
from __future__ import annotations

from typing import Any

import structlog
from pymongo import DESCENDING
from pymongo.collection import Collection

from ..config.constants import (
    FIELD_COUNTRY,
    FIELD_TYPE,
    FIELD_UPDATED_ON,
    RECENT_PROJECTION,
    RECENTLY_UPDATED_LIMIT,
    TOP_COUNTRIES_LIMIT,
    TOP_TYPES_LIMIT,
)
from .base_service import BaseService

logger = structlog.get_logger("uniportal.services.stats")


def group_count_pipeline(field: str, limit: int | None = None) -> list[dict[str, Any]]:
    """$group pipeline counting records per non-blank value of field.

    Sorted by count descending, ties by value ascending.
    """
    pipeline: list[dict[str, Any]] = [
        {"$match": {field: {"$exists": True, "$nin": [None, ""]}}},
        {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        {"$sort": {"count": -1, "_id": 1}},
    ]
    if limit:
        pipeline.append({"$limit": limit})
    return pipeline


class StatsService(BaseService):
    """Business logic for aggregate statistics."""

    def _group_counts(
        self, collection: Collection, field: str, key: str, limit: int | None = None
    ) -> list[dict]:
        rows = self._aggregate(collection, group_count_pipeline(field, limit))
        return [
            {key: row["_id"], "count": row["count"]}
            for row in rows
            if isinstance(row["_id"], str) and row["_id"].strip()
        ]

    def country_counts(self, collection: Collection, limit: int | None = None) -> list[dict]:
        """Countries with record counts, most records first."""
        return self._group_counts(collection, FIELD_COUNTRY, "country", limit)

    def type_counts(self, collection: Collection, limit: int | None = None) -> list[dict]:
        """Institution types with record counts, most records first."""
        return self._group_counts(collection, FIELD_TYPE, "type", limit)

    def recently_updated(self, collection: Collection, limit: int = RECENTLY_UPDATED_LIMIT) -> list[dict]:
        return self._find_many(
            collection,
            {FIELD_UPDATED_ON: {"$exists": True}},
            RECENT_PROJECTION,
            sort=[(FIELD_UPDATED_ON, DESCENDING)],
            limit=limit,
        )

    def overview(self, collection: Collection) -> dict:
        """Total count, top countries, top types and most recently updated records."""
        overview = {
            "total_universities": collection.count_documents({}),
            "top_countries": self.country_counts(collection, TOP_COUNTRIES_LIMIT),
            "institution_types": self.type_counts(collection, TOP_TYPES_LIMIT),
            "recently_updated": self.recently_updated(collection),
        }
        logger.debug("stats_overview_computed", total=overview["total_universities"])
        return overview


# Singleton instance
stats_service = StatsService()
