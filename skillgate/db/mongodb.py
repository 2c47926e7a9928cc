"""
MongoDB Connection Utility

MongoDB stores every portal entity:
- users: students, companies and admins (with approval status)
- drives: job postings with embedded test questions
- applications: one document per (student, drive) pair

Uniqueness that the business rules depend on (email, one application per
student and drive) is backed by indexes created in init_mongo_indexes().
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from skillgate.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def set_mongo_client(client: MongoClient) -> None:
    """Swap the process-wide client (used by tests and scripts)."""
    global _client, _db
    _client = client
    _db = None


def get_collection(name: str) -> Collection:
    """Get a specific collection. Use the COLLECTIONS constants for names."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "drives": "drives",
    "applications": "applications",
}


def init_mongo_indexes():
    """
    Create indexes for uniqueness and query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    users = db[COLLECTIONS["users"]]
    users.create_index("email", unique=True)
    users.create_index([("status", ASCENDING), ("role", ASCENDING)])

    drives = db[COLLECTIONS["drives"]]
    drives.create_index([("companyId", ASCENDING), ("createdAt", DESCENDING)])
    drives.create_index([("status", ASCENDING), ("deadline", ASCENDING)])

    applications = db[COLLECTIONS["applications"]]
    # One application per student and drive, even under concurrent requests
    applications.create_index([
        ("studentId", ASCENDING),
        ("driveId", ASCENDING)
    ], unique=True)
    applications.create_index([("driveId", ASCENDING), ("appliedAt", DESCENDING)])

    logger.info("MongoDB indexes created successfully")
