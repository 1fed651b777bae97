"""
MongoDB access

One collection per entity, named after the lowercase schema class
(Product -> "product"). Route handlers receive the database through the
`get_db` dependency so tests can swap in an in-memory client.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient

import config

logger = logging.getLogger(__name__)

client = None
db = None

if config.DATABASE_URL:
    try:
        client = MongoClient(config.DATABASE_URL)
        db = client[config.DATABASE_NAME]
    except Exception as e:
        logger.error(f"Could not connect to MongoDB: {e}")
        client = None
        db = None

# collection -> fields carrying a unique index
UNIQUE_KEYS = {
    "user": "email",
    "product": "sku",
    "initiative": "slug",
    "newslettersubscription": "email",
    "sitesetting": "key",
}


def get_db():
    if db is None:
        raise HTTPException(status_code=500, detail="Database not available")
    return db


def ensure_indexes(database) -> None:
    for collection, field in UNIQUE_KEYS.items():
        database[collection].create_index([(field, ASCENDING)], unique=True)
    database["order"].create_index([("user_id", ASCENDING)])
    database["order"].create_index([("order_number", ASCENDING)])


def now() -> datetime:
    return datetime.now(timezone.utc)


def create_document(database, collection_name: str, data: Union[BaseModel, dict]) -> dict:
    """Insert a document stamped with created_at/updated_at and return it."""
    if isinstance(data, BaseModel):
        doc = data.model_dump()
    else:
        doc = dict(data)
    doc["created_at"] = now()
    doc["updated_at"] = now()
    result = database[collection_name].insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


def get_documents(database, collection_name: str, filter_dict: Optional[dict] = None,
                  sort: Optional[list] = None, skip: int = 0, limit: int = 0) -> list:
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if skip:
        cursor = cursor.skip(skip)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def parse_object_id(value: str, not_found: str = "Not found") -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=404, detail=not_found)
