"""API router for aggregate statistics endpoints."""
from fastapi import APIRouter, Depends, Request
from pymongo.collection import Collection

from ..cache import ResponseCache, cached_envelope, get_response_cache
from ..config.constants import CACHE_TTLS
from ..dependencies import get_collection
from ..rate_limit import rate_limit
from ..models.common import ListEnvelope
from ..models.stats import CountryCount, StatsOverview, StatsOverviewResponse
from ..services.stats_service import stats_service

router = APIRouter(prefix="/stats", tags=["statistics"])


@router.get("", response_model=StatsOverviewResponse, response_model_exclude_none=True)
@rate_limit()
def get_stats(
    request: Request,
    collection: Collection = Depends(get_collection),
    cache: ResponseCache = Depends(get_response_cache),
):
    """
    Overview statistics.

    Returns the total record count, the top 10 countries, the top 5
    institution types and the 5 most recently updated records.
    """

    def build() -> StatsOverviewResponse:
        return StatsOverviewResponse(data=StatsOverview(**stats_service.overview(collection)))

    return cached_envelope(cache, "stats", request, CACHE_TTLS["stats"], build)


@router.get(
    "/countries/all",
    response_model=ListEnvelope[CountryCount],
    response_model_exclude_none=True,
)
@rate_limit()
def get_all_country_stats(
    request: Request,
    collection: Collection = Depends(get_collection),
    cache: ResponseCache = Depends(get_response_cache),
):
    """Every country with its record count, most records first."""

    def build() -> ListEnvelope[CountryCount]:
        rows = [CountryCount(**row) for row in stats_service.country_counts(collection)]
        return ListEnvelope[CountryCount](data=rows, count=len(rows))

    return cached_envelope(cache, "stats_countries", request, CACHE_TTLS["stats_countries"], build)
