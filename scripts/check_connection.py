#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB is reachable and the indexes exist.
Usage: python scripts/check_connection.py
"""
import sys
sys.path.insert(0, '.')

from skillgate.db.mongodb import test_mongo_connection, init_mongo_indexes, get_mongo_db, COLLECTIONS
from skillgate.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("SKILLGATE PORTAL - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if not test_mongo_connection():
        print("    ❌ MongoDB: FAILED")
        return 1
    print("    ✅ MongoDB: CONNECTED")

    print("\n[2] Ensuring indexes...")
    init_mongo_indexes()
    db = get_mongo_db()
    for name in COLLECTIONS.values():
        indexes = sorted(db[name].index_information())
        print(f"    {name}: {db[name].count_documents({})} documents, indexes: {', '.join(indexes)}")

    print("\n[3] Admin bootstrap login:", "enabled" if settings.admin_bootstrap_enabled else "disabled")
    return 0


if __name__ == "__main__":
    sys.exit(main())
