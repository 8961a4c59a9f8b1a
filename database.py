"""
MongoDB access

The client is created on first use. Route handlers receive the database
through the ``get_db`` dependency so tests can swap in an in-memory one.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple

from pymongo import MongoClient, ASCENDING
from pymongo.database import Database

from config import get_settings

logger = logging.getLogger(__name__)

USERS = "users"
PRODUCTS = "products"

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        settings = get_settings()
        _client = MongoClient(settings.mongo_url)
        logger.info("Connected to MongoDB")
    return _client


def get_db() -> Database:
    return get_client()[get_settings().database_name]


def ensure_indexes(db: Database) -> None:
    """Unique indexes back the email and product id checks done in code."""
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[PRODUCTS].create_index([("id", ASCENDING)], unique=True)


def create_document(db: Database, collection: str, data: Dict[str, Any]) -> str:
    doc = dict(data)
    doc.setdefault("date", datetime.now(timezone.utc))
    inserted_id = db[collection].insert_one(doc).inserted_id
    return str(inserted_id)


def get_documents(
    db: Database,
    collection: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    sort: Optional[List[Tuple[str, int]]] = None,
    limit: int = 0,
) -> List[Dict[str, Any]]:
    cursor = db[collection].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def doc_to_public(doc: Dict[str, Any]) -> Dict[str, Any]:
    if not doc:
        return doc
    doc = dict(doc)
    doc.pop("_id", None)
    # hide sensitive fields
    doc.pop("password", None)
    return doc
