"""
Create or verify the search indexes on the universities collection.

The API does this at startup when ENSURE_INDEXES=true; run this script
instead when the API runs with index creation disabled.
"""
import sys
import time

from pymongo.errors import PyMongoError

from uniportal.dependencies import (
    COLLECTION_NAME,
    DATABASE_NAME,
    INDEXES,
    close_client,
    ensure_indexes,
    get_collection,
)


def main() -> int:
    print("=" * 60)
    print("INDEX BOOTSTRAP")
    print("=" * 60)
    print(f"Target: {DATABASE_NAME}.{COLLECTION_NAME}")

    collection = get_collection()
    start = time.time()
    try:
        ok = ensure_indexes(collection)
        existing = sorted(collection.index_information())
    except PyMongoError as e:
        print(f"  Failed: {e}")
        return 1
    finally:
        close_client()

    print(f"  Created/verified {ok}/{len(INDEXES)} indexes ({time.time() - start:.1f}s)")
    for name in existing:
        print(f"  Exists: {name}")
    return 0 if ok == len(INDEXES) else 1


if __name__ == "__main__":
    sys.exit(main())
