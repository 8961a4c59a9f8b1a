"""
Catalog Service

Products carry a sequential integer ``id`` (highest existing id + 1, or 1 for
an empty catalog). Listing order is insertion order, i.e. ``_id`` ascending.
"""

import logging
from typing import List, Dict, Any

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import PRODUCTS, create_document, get_documents, doc_to_public
from errors import ProductNotFound
from schemas import Product

logger = logging.getLogger(__name__)

ID_ASSIGN_ATTEMPTS = 5
NEW_COLLECTION_SIZE = 8
POPULAR_LIMIT = 4


def next_product_id(db: Database) -> int:
    last = db[PRODUCTS].find_one({}, {"id": 1}, sort=[("id", DESCENDING)])
    return int(last["id"]) + 1 if last else 1


def add_product(
    db: Database,
    name: str,
    image: str,
    category: str,
    new_price: float,
    old_price: float,
    available: bool = True,
) -> Dict[str, Any]:
    attempt = 0
    while True:
        attempt += 1
        product = Product(
            id=next_product_id(db),
            name=name,
            image=image,
            category=category,
            new_price=new_price,
            old_price=old_price,
            available=available,
        )
        try:
            create_document(db, PRODUCTS, product.model_dump())
            break
        except DuplicateKeyError:
            # a concurrent add took this id
            if attempt >= ID_ASSIGN_ATTEMPTS:
                raise
            logger.warning("Product id %s already taken, retrying", product.id)
    logger.info("Added product %s: %s", product.id, product.name)
    return product.model_dump()


def remove_product(db: Database, product_id: int) -> Dict[str, Any]:
    doc = db[PRODUCTS].find_one_and_delete({"id": product_id})
    if not doc:
        raise ProductNotFound()
    logger.info("Removed product %s: %s", product_id, doc.get("name"))
    return doc_to_public(doc)


def list_all(db: Database) -> List[Dict[str, Any]]:
    return [doc_to_public(p) for p in get_documents(db, PRODUCTS, sort=[("_id", ASCENDING)])]


def list_newest(db: Database, n: int = NEW_COLLECTION_SIZE) -> List[Dict[str, Any]]:
    """Last ``n`` products by insertion order, oldest first."""
    if n <= 0:
        return []
    docs = get_documents(db, PRODUCTS, sort=[("_id", DESCENDING)], limit=n)
    return [doc_to_public(p) for p in reversed(docs)]


def list_by_category(db: Database, category: str, limit: int = POPULAR_LIMIT) -> List[Dict[str, Any]]:
    if limit <= 0:
        return []
    docs = get_documents(db, PRODUCTS, {"category": category}, sort=[("_id", ASCENDING)], limit=limit)
    return [doc_to_public(p) for p in docs]
