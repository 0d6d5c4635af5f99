import logging
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.database import Database
from pydantic import BaseModel

logger = logging.getLogger(__name__)


def connect(database_url: str, database_name: str):
    """Open the process-wide client; pymongo connects lazily on first use"""
    client = MongoClient(database_url, tz_aware=True)
    logger.info(f"MongoDB client created for database {database_name}")
    return client, client[database_name]


def to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def as_reference(value: Any) -> Union[ObjectId, str]:
    """Store ids as ObjectId when they look like one, so lookups by _id work"""
    return to_object_id(value) or str(value)


# Utility to convert Mongo documents

def serialize_doc(doc):
    if isinstance(doc, list):
        return [serialize_doc(d) for d in doc]
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, (datetime, date)):
        return doc.isoformat()
    if not isinstance(doc, dict):
        return doc
    d = {}
    for key, value in doc.items():
        if key == "_id":
            d["id"] = serialize_doc(value)
        else:
            d[key] = serialize_doc(value)
    return d


def create_document(db: Database, collection_name: str, data: Union[BaseModel, dict]) -> dict:
    if isinstance(data, BaseModel):
        data_dict = data.model_dump(by_alias=True)
    else:
        data_dict = dict(data)
    data_dict.setdefault("createdAt", datetime.now(timezone.utc))
    data_dict["updatedAt"] = datetime.now(timezone.utc)
    result = db[collection_name].insert_one(data_dict)
    data_dict["_id"] = result.inserted_id
    return data_dict


def get_documents(db: Database, collection_name: str, filter_dict: Optional[dict] = None) -> List[dict]:
    return list(db[collection_name].find(filter_dict or {}))


class MongoStore:
    """find / find_by_id / save over one collection"""

    collection_name: str = ""

    def __init__(self, db: Database):
        self.db = db

    @property
    def collection(self):
        return self.db[self.collection_name]

    def find(self, filter_dict: Optional[dict] = None) -> List[dict]:
        return get_documents(self.db, self.collection_name, filter_dict)

    def find_by_id(self, doc_id: Any) -> Optional[dict]:
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def find_many(self, ids: Iterable[Any]) -> List[dict]:
        oids = [oid for oid in (to_object_id(i) for i in ids) if oid is not None]
        if not oids:
            return []
        return self.find({"_id": {"$in": oids}})

    def save(self, doc: dict) -> dict:
        if doc.get("_id") is None:
            doc.pop("_id", None)
            return create_document(self.db, self.collection_name, doc)
        doc["updatedAt"] = datetime.now(timezone.utc)
        self.collection.replace_one({"_id": doc["_id"]}, doc)
        return doc


class OrderStore(MongoStore):
    collection_name = "order"

    def find_for_user(self, user_id: Any, statuses: Iterable[str]) -> List[dict]:
        return self.find({
            "user": as_reference(user_id),
            "status": {"$in": [getattr(s, "value", s) for s in statuses]},
        })


class RestaurantStore(MongoStore):
    collection_name = "restaurant"


class UserStore(MongoStore):
    collection_name = "user"

    def find_by_auth0_id(self, auth0_id: str) -> Optional[dict]:
        return self.collection.find_one({"auth0Id": auth0_id})
