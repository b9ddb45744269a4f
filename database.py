"""
MongoDB access helpers.

The database handle lives on ``app.state.db``; route handlers get it via
the ``get_db`` dependency so tests can hand the app any pymongo-compatible
database.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from settings import Settings

log = logging.getLogger(__name__)

USERS = "users"
PROFILES = "profiles"
POSTS = "posts"


def connect(settings: Settings) -> Database:
    log.info("Connecting to MongoDB database %s", settings.database_name)
    client = MongoClient(settings.database_url)
    return client[settings.database_name]


def ensure_indexes(db: Database) -> None:
    db[USERS].create_index([("username", ASCENDING)], unique=True)
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[PROFILES].create_index([("user", ASCENDING)], unique=True)
    db[POSTS].create_index([("user", ASCENDING)])


def get_db(request: Request) -> Database:
    return request.app.state.db


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id taken from a URL or a token. Malformed ids are None."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def create_document(db: Database, collection_name: str, data: Union[BaseModel, dict]) -> dict:
    """Insert a document and return it with its ``_id``."""
    if isinstance(data, BaseModel):
        data = data.model_dump()
    doc = dict(data)
    doc.setdefault("date", datetime.now(timezone.utc))
    result = db[collection_name].insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


def get_documents(db: Database, collection_name: str, filter_dict: Optional[dict] = None,
                  sort: Optional[list] = None) -> List[dict]:
    cursor = db[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    return list(cursor)


def to_public(value: Any) -> Any:
    """Make a stored document JSON friendly: ``_id`` becomes ``id``, ObjectIds become strings."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [to_public(v) for v in value]
    if isinstance(value, dict):
        out = {}
        for key, item in value.items():
            if key == "_id":
                out["id"] = str(item)
            else:
                out[key] = to_public(item)
        return out
    return value
