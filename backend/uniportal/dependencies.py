"""MongoDB connection, index bootstrap and common dependencies for the API."""
import os
from functools import lru_cache

import structlog
from pymongo import ASCENDING, DESCENDING, TEXT, MongoClient
from pymongo.collection import Collection
from pymongo.errors import OperationFailure, PyMongoError

from .config.constants import (
    FIELD_ADDRESS_COUNTRY,
    FIELD_CITY,
    FIELD_COUNTRY,
    FIELD_IAU_ID,
    FIELD_NAME,
    FIELD_STATUS,
    FIELD_TYPE,
    FIELD_UPDATED_ON,
    TEXT_INDEX_NAME,
    TEXT_INDEX_WEIGHTS,
)

logger = structlog.get_logger("uniportal.db")

MONGODB_URI = os.environ.get("MONGODB_URI", "mongodb://localhost:27017")
DATABASE_NAME = os.environ.get("DATABASE_NAME", "university_db")
COLLECTION_NAME = os.environ.get("COLLECTION_NAME", "universities")

MONGODB_MAX_POOL_SIZE = int(os.environ.get("MONGODB_MAX_POOL_SIZE", "10"))
MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(
    os.environ.get("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "10000")
)
MONGODB_SOCKET_TIMEOUT_MS = int(os.environ.get("MONGODB_SOCKET_TIMEOUT_MS", "45000"))

ENSURE_INDEXES = os.environ.get("ENSURE_INDEXES", "true").lower() == "true"

# Mongo error code for "index already exists with different options"
INDEX_OPTIONS_CONFLICT = 85

INDEXES = [
    ([(field, TEXT) for field in TEXT_INDEX_WEIGHTS], {"name": TEXT_INDEX_NAME, "weights": TEXT_INDEX_WEIGHTS}),
    ([(FIELD_IAU_ID, ASCENDING)], {"unique": True, "sparse": True}),
    ([(FIELD_NAME, ASCENDING)], {}),
    ([(FIELD_COUNTRY, ASCENDING)], {}),
    ([(FIELD_CITY, ASCENDING)], {}),
    ([(FIELD_ADDRESS_COUNTRY, ASCENDING)], {}),
    ([(FIELD_TYPE, ASCENDING)], {}),
    ([(FIELD_STATUS, ASCENDING)], {}),
    ([(FIELD_UPDATED_ON, DESCENDING)], {}),
    ([(FIELD_COUNTRY, ASCENDING), (FIELD_NAME, ASCENDING)], {}),
    ([(FIELD_CITY, ASCENDING), (FIELD_COUNTRY, ASCENDING)], {}),
]


@lru_cache(maxsize=1)
def get_client() -> MongoClient:
    """Process-wide MongoClient. Connects lazily on first operation.

    The client is thread-safe and owns the connection pool, so FastAPI's
    worker threads share it.
    """
    logger.info("mongo_client_created", database=DATABASE_NAME, collection=COLLECTION_NAME)
    return MongoClient(
        MONGODB_URI,
        maxPoolSize=MONGODB_MAX_POOL_SIZE,
        serverSelectionTimeoutMS=MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        socketTimeoutMS=MONGODB_SOCKET_TIMEOUT_MS,
        tz_aware=True,
    )


def get_collection() -> Collection:
    """FastAPI dependency returning the universities collection."""
    return get_client()[DATABASE_NAME][COLLECTION_NAME]


def close_client() -> None:
    """Close the shared client if one was created."""
    if get_client.cache_info().currsize:
        get_client().close()
        get_client.cache_clear()
        logger.info("mongo_client_closed")


def ensure_indexes(collection: Collection) -> int:
    """Create the search indexes. Returns the number of indexes created or verified.

    An index that already exists under different options counts as verified.
    Other failures on individual indexes are logged and skipped.
    """
    ok = 0
    for keys, options in INDEXES:
        fields = [k for k, _ in keys]
        try:
            collection.create_index(keys, **options)
            ok += 1
        except OperationFailure as e:
            if e.code == INDEX_OPTIONS_CONFLICT:
                logger.info("index_exists_with_other_options", keys=fields)
                ok += 1
            else:
                logger.warning("index_create_failed", keys=fields, error=str(e))
    logger.info("indexes_verified", count=ok, total=len(INDEXES))
    return ok


def verify_database_reachable(collection: Collection) -> bool:
    """Ping the server backing the collection."""
    try:
        collection.database.client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("database_ping_failed", error=str(e))
        return False
