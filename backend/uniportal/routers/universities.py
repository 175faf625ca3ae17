"""API router for university search, suggestions and detail."""
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Path, Query, Request
from pymongo.collection import Collection

from ..cache import ResponseCache, cached_envelope, get_response_cache
from ..config.constants import CACHE_TTLS
from ..dependencies import get_collection
from ..rate_limit import rate_limit
from ..middleware.error_handler import NotFoundError
from ..models.common import ListEnvelope, PaginatedEnvelope
from ..models.university import University, UniversityResponse
from ..services.query_builder import SearchFilters
from ..services.university_service import university_service
from ..validation import PageParams, check_length, page_params, search_filters, suggest_limit

logger = structlog.get_logger("uniportal.routers.universities")

router = APIRouter(prefix="/universities", tags=["universities"])


@router.get(
    "/search",
    response_model=PaginatedEnvelope[University],
    response_model_exclude_none=True,
)
@rate_limit()
def search_universities(
    request: Request,
    filters: SearchFilters = Depends(search_filters),
    paging: PageParams = Depends(page_params),
    collection: Collection = Depends(get_collection),
    cache: ResponseCache = Depends(get_response_cache),
):
    """
    Search universities with filters, sorting and pagination.

    ``search`` runs a full-text query and takes precedence over ``name``.
    ``country``, ``city``, ``type`` and ``status`` are case-insensitive
    substring filters, combined with AND.
    """

    def build() -> PaginatedEnvelope[University]:
        result = university_service.search(
            collection,
            filters,
            page=paging.page,
            limit=paging.limit,
            sort_by=paging.sort_by,
            sort_order=paging.sort_order,
        )
        records = [University.model_validate(doc) for doc in result.data]
        return PaginatedEnvelope[University](
            data=records,
            count=len(records),
            pagination=result.pagination,
            query=filters.present(),
        )

    return cached_envelope(cache, "search", request, CACHE_TTLS["search"], build)


@router.get(
    "/suggest",
    response_model=ListEnvelope[University],
    response_model_exclude_none=True,
)
@rate_limit()
def suggest_universities(
    request: Request,
    q: Optional[str] = Query(None, description="Partial name (at least 2 characters)"),
    limit: int = Depends(suggest_limit),
    collection: Collection = Depends(get_collection),
    cache: ResponseCache = Depends(get_response_cache),
):
    """Type-ahead suggestions by name or short name, minimal fields only."""
    check_length("q", q)

    def build() -> ListEnvelope[University]:
        records = [
            University.model_validate(doc)
            for doc in university_service.suggest(collection, q, limit)
        ]
        return ListEnvelope[University](data=records, count=len(records))

    return cached_envelope(cache, "suggest", request, CACHE_TTLS["suggest"], build)


@router.get(
    "/{university_id}",
    response_model=UniversityResponse,
    response_model_exclude_none=True,
)
@rate_limit()
def get_university(
    request: Request,
    university_id: str = Path(..., description="Native id (24 hex chars) or IAU id"),
    collection: Collection = Depends(get_collection),
    cache: ResponseCache = Depends(get_response_cache),
):
    """Full record by native id or IAU id. 404 when neither matches."""

    def build() -> UniversityResponse:
        doc = university_service.get_detail(collection, university_id)
        if doc is None:
            logger.info("university_not_found", university_id=university_id)
            raise NotFoundError("University not found")
        return UniversityResponse(data=University.model_validate(doc))

    return cached_envelope(cache, "detail", request, CACHE_TTLS["detail"], build)
