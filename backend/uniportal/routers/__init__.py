# API routers
from .universities import router as universities_router
from .catalog import router as catalog_router
from .stats import router as stats_router

__all__ = [
    "universities_router",
    "catalog_router",
    "stats_router",
]
