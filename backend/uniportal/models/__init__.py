# Pydantic models for API request/response
from .common import Envelope, ListEnvelope, PaginatedEnvelope, PaginationMeta
from .university import University, UniversityResponse
from .stats import CountryCount, StatsOverview, StatsOverviewResponse, TypeCount

__all__ = [
    "Envelope",
    "ListEnvelope",
    "PaginatedEnvelope",
    "PaginationMeta",
    "University",
    "UniversityResponse",
    "CountryCount",
    "TypeCount",
    "StatsOverview",
    "StatsOverviewResponse",
]
