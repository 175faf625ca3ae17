"""API router for the country and city catalogs."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pymongo.collection import Collection

from ..cache import ResponseCache, cached_envelope, get_response_cache
from ..config.constants import CACHE_TTLS
from ..dependencies import get_collection
from ..rate_limit import rate_limit
from ..models.common import ListEnvelope
from ..services.query_builder import clean
from ..services.university_service import university_service
from ..validation import check_length

router = APIRouter(tags=["catalog"])


class CityListEnvelope(ListEnvelope[str]):
    """City list plus the country filter it was built with."""

    country: str


@router.get("/countries", response_model=ListEnvelope[str], response_model_exclude_none=True)
@rate_limit()
def list_countries(
    request: Request,
    collection: Collection = Depends(get_collection),
    cache: ResponseCache = Depends(get_response_cache),
):
    """Sorted distinct country names."""

    def build() -> ListEnvelope[str]:
        countries = university_service.list_countries(collection)
        return ListEnvelope[str](data=countries, count=len(countries))

    return cached_envelope(cache, "countries", request, CACHE_TTLS["countries"], build)


@router.get("/cities", response_model=CityListEnvelope, response_model_exclude_none=True)
@rate_limit()
def list_cities(
    request: Request,
    country: Optional[str] = Query(None, description="Restrict to countries containing this text"),
    collection: Collection = Depends(get_collection),
    cache: ResponseCache = Depends(get_response_cache),
):
    """Sorted distinct city names, optionally filtered by country."""
    check_length("country", country)

    def build() -> CityListEnvelope:
        cities = university_service.list_cities(collection, country)
        return CityListEnvelope(data=cities, count=len(cities), country=clean(country) or "all")

    return cached_envelope(cache, "cities", request, CACHE_TTLS["cities"], build)
