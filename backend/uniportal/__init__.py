# University Search Portal API
"""
REST API over a static MongoDB collection of university records.

Endpoints:
- GET /api/universities/search - Filtered, sorted, paginated search
- GET /api/universities/suggest - Type-ahead suggestions
- GET /api/universities/{id} - Full record by native id or IAU id
- GET /api/countries, /api/cities - Catalog lists
- GET /api/stats, /api/stats/countries/all - Aggregate statistics
"""
