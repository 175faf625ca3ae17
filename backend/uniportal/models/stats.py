"""Pydantic models for statistics endpoints."""
from typing import List

from pydantic import BaseModel, Field

from .common import CamelModel, Envelope
from .university import University


class CountryCount(BaseModel):
    country: str
    count: int


class TypeCount(BaseModel):
    type: str
    count: int


class StatsOverview(CamelModel):
    """Overview statistics over the full record set."""

    total_universities: int = Field(..., description="Total number of records")
    top_countries: List[CountryCount] = Field(default_factory=list, description="Top 10 countries")
    institution_types: List[TypeCount] = Field(default_factory=list, description="Top 5 types")
    recently_updated: List[University] = Field(
        default_factory=list, description="Most recently updated records"
    )


class StatsOverviewResponse(Envelope):
    data: StatsOverview
