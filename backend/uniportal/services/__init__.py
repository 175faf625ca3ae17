"""
Service layer for the University Search Portal API.

Domain services encapsulate query construction and data mapping.
Routers stay thin: parse request → call service → return response.
"""
from .query_builder import QueryBuilder, SearchFilters, build_search_query, build_sort_options
from .pagination import paginate_query, PaginatedResult
from .university_service import university_service
from .stats_service import stats_service

__all__ = [
    "QueryBuilder",
    "SearchFilters",
    "build_search_query",
    "build_sort_options",
    "paginate_query",
    "PaginatedResult",
    "university_service",
    "stats_service",
]
