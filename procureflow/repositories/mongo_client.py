"""MongoDB Client - Lazy connection, collections and indexes"""
from typing import Any, Dict, List, Optional, Tuple
from pymongo import MongoClient as PyMongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, PyMongoError

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

REQUESTS_COLLECTION = "requests"
AUDIT_EVENTS_COLLECTION = "audit_events"

# (keys, options) per collection; applied idempotently on startup
INDEXES: Dict[str, List[Tuple[Any, Dict[str, Any]]]] = {
    REQUESTS_COLLECTION: [
        ("request_id", {"unique": True}),
        ([("requester.user_id", ASCENDING), ("created_at", DESCENDING)], {}),
        ([("status", ASCENDING), ("created_at", DESCENDING)], {}),
        ("college", {}),
    ],
    AUDIT_EVENTS_COLLECTION: [
        ("audit_event_id", {"unique": True}),
        ([("request_id", ASCENDING), ("timestamp", DESCENDING)], {}),
        ("correlation_id", {"sparse": True}),
    ],
}

_client: Optional[PyMongoClient] = None
_database: Optional[Database] = None


def get_client() -> PyMongoClient:
    """
    Get or create the process-wide client

    The client is tz-aware so stored UTC timestamps come back with tzinfo.
    """
    global _client
    if _client is None:
        logger.info(f"Connecting to MongoDB: {settings.mongo_uri}")
        client = PyMongoClient(
            settings.mongo_uri,
            tz_aware=True,
            appname="procureflow",
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
        )
        try:
            client.admin.command("ping")
        except ConnectionFailure as e:
            logger.error(f"MongoDB connection failed: {e}")
            client.close()
            raise
        _client = client
    return _client


def get_database() -> Database:
    global _database
    if _database is None:
        _database = get_client()[settings.mongo_db]
        logger.info(f"Using database: {settings.mongo_db}")
    return _database


def get_collection(name: str) -> Collection:
    return get_database()[name]


def close_connection() -> None:
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


def create_indexes(db: Optional[Database] = None) -> None:
    """Create the indexes listed in INDEXES (on db, or the application database)"""
    db = db if db is not None else get_database()
    for collection, indexes in INDEXES.items():
        for keys, options in indexes:
            db[collection].create_index(keys, **options)
        logger.info(f"Indexes ensured on {collection} ({len(indexes)})")


def health_check() -> Dict[str, Any]:
    """Ping the server and report the size of the request store"""
    try:
        db = get_database()
        db.command("ping")
        return {
            "status": "healthy",
            "database": settings.mongo_db,
            "requests": db[REQUESTS_COLLECTION].estimated_document_count(),
        }
    except PyMongoError as e:
        logger.error(f"MongoDB health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": settings.mongo_db,
            "error": str(e),
        }
