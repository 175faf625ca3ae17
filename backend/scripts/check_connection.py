"""
MongoDB connectivity check.

Pings the configured server, then lists the collections of the configured
database. Credentials in the URI are masked in the output.

Usage: python -m scripts.check_connection   (from backend/)
"""
import re
import sys

from pymongo import MongoClient
from pymongo.errors import ConfigurationError, OperationFailure, PyMongoError

from uniportal.dependencies import (
    DATABASE_NAME,
    MONGODB_SERVER_SELECTION_TIMEOUT_MS,
    MONGODB_SOCKET_TIMEOUT_MS,
    MONGODB_URI,
)


def mask_uri(uri: str) -> str:
    return re.sub(r"//[^/@]*@", "//***:***@", uri)


def check_connection() -> int:
    print("=" * 60)
    print("MONGODB CONNECTION CHECK")
    print("=" * 60)
    print(f"URI: {mask_uri(MONGODB_URI)}")

    try:
        client = MongoClient(
            MONGODB_URI,
            serverSelectionTimeoutMS=MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            socketTimeoutMS=MONGODB_SOCKET_TIMEOUT_MS,
        )
        client.admin.command("ping")
        print("  Connected")

        names = client[DATABASE_NAME].list_collection_names()
        print(f"  Database accessible: {DATABASE_NAME}")
        print(f"  Collections: {', '.join(sorted(names)) or '(none)'}")

        client.close()
        print("  Connection closed")
        return 0
    except OperationFailure as e:
        print(f"  Failed: {e}")
        print("  Hint: check the username/password and the IP allow list")
        return 1
    except ConfigurationError as e:
        print(f"  Failed: {e}")
        print("  Hint: check the URI and DNS resolution")
        return 1
    except PyMongoError as e:
        print(f"  Failed: {type(e).__name__}: {e}")
        print("  Hint: check network access to the server")
        return 1


if __name__ == "__main__":
    sys.exit(check_connection())
