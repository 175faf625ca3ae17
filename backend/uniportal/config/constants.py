"""
Centralized constants for the University Search Portal.

Document field paths, sort whitelist, projections and request limits live here.
Import from here instead of spelling field paths inline.
"""

# Document field paths
FIELD_NAME = "institution.name"
FIELD_SHORT_NAME = "institution.short_name"
FIELD_IAU_ID = "institution.iau_id"
FIELD_COUNTRY = "institution.country_line"
FIELD_UPDATED_ON = "institution.updated_on"
FIELD_CITY = "general_information.address.city"
FIELD_ADDRESS_COUNTRY = "general_information.address.country"
FIELD_TYPE = "general_information.type"
FIELD_STATUS = "general_information.status"
FIELD_ESTABLISHED = "general_information.established"
FIELD_TOTAL_STUDENTS = "student_staff_numbers.total_students"
FIELD_DIVISION_NAME = "divisions.name"
FIELD_PROGRAM_NAME = "degrees.programs.name"

# Public sort names -> document paths
SORT_FIELDS = {
    "name": FIELD_NAME,
    "country": FIELD_COUNTRY,
    "city": FIELD_CITY,
    "type": FIELD_TYPE,
    "updated": FIELD_UPDATED_ON,
    "established": FIELD_ESTABLISHED,
}
DEFAULT_SORT_FIELD = "name"
SORT_ORDERS = ("asc", "desc")

# Pagination
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Largest page whose offset (page - 1) * MAX_LIMIT still fits a signed 64-bit int
MAX_PAGE = (2**63 - 1) // MAX_LIMIT + 1

# Suggestions
SUGGEST_MIN_QUERY_LENGTH = 2
SUGGEST_DEFAULT_LIMIT = 10
SUGGEST_MAX_LIMIT = 20

# Max lengths for free-text query parameters
MAX_LENGTHS = {
    "search": 100,
    "name": 100,
    "country": 50,
    "city": 50,
    "type": 50,
    "status": 50,
    "q": 100,
}

# Native ids are 24 hex chars; anything else is treated as an IAU id
OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

# Summary fields only, never full nested detail
SUMMARY_PROJECTION = {
    "_id": 1,
    FIELD_NAME: 1,
    FIELD_SHORT_NAME: 1,
    FIELD_IAU_ID: 1,
    FIELD_COUNTRY: 1,
    FIELD_CITY: 1,
    FIELD_ADDRESS_COUNTRY: 1,
    FIELD_TYPE: 1,
    FIELD_STATUS: 1,
    FIELD_ESTABLISHED: 1,
    FIELD_TOTAL_STUDENTS: 1,
    FIELD_UPDATED_ON: 1,
}

SUGGEST_PROJECTION = {
    "_id": 1,
    FIELD_NAME: 1,
    FIELD_SHORT_NAME: 1,
    FIELD_IAU_ID: 1,
    FIELD_COUNTRY: 1,
    FIELD_CITY: 1,
}

RECENT_PROJECTION = {
    "_id": 1,
    FIELD_NAME: 1,
    FIELD_COUNTRY: 1,
    FIELD_UPDATED_ON: 1,
}

# Statistics sizes
TOP_COUNTRIES_LIMIT = 10
TOP_TYPES_LIMIT = 5
RECENTLY_UPDATED_LIMIT = 5

# Response cache TTLs (seconds) per route namespace
CACHE_TTLS = {
    "search": 300,
    "suggest": 300,
    "detail": 600,
    "countries": 3600,
    "cities": 3600,
    "stats_countries": 1800,
    "stats": 600,
}

# Text index: field -> weight
TEXT_INDEX_NAME = "text_search_index"
TEXT_INDEX_WEIGHTS = {
    FIELD_NAME: 10,
    FIELD_SHORT_NAME: 8,
    FIELD_CITY: 5,
    FIELD_DIVISION_NAME: 3,
    FIELD_PROGRAM_NAME: 2,
}
