"""
MongoDB access for the inquiry intake service

`db` is configured from DATABASE_URL / DATABASE_NAME and is None when they
are not set. MongoDirectory and MongoRecordStore adapt a pymongo database to
the directory and record-store capabilities in ports.py.
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from errors import DirectoryFault, RecordWriteFault, RequiredFieldsMissing
from ports import Column, DirectoryQuery, Filter, RecordHandle, RecordStore, SearchResult
from schemas import REQUIRED_FIELDS

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

_client: Optional[MongoClient] = MongoClient(DATABASE_URL) if DATABASE_URL else None
db: Optional[Database] = _client[DATABASE_NAME] if _client is not None and DATABASE_NAME else None

# join name -> (reference field on the searched document, joined collection)
JOINS: Dict[str, tuple] = {
    "salesRep": ("sales_rep", "employee"),
}

# Fields holding another document's _id
_REFERENCE_FIELDS = {"customer", "sales_rep"}


def as_object_id(value: Any) -> Any:
    """Use an ObjectId for values that look like one, the raw value otherwise."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def _require_db(database: Optional[Database]) -> Database:
    database = database if database is not None else db
    if database is None:
        raise Exception("Database not available. Check DATABASE_URL and DATABASE_NAME environment variables.")
    return database


def create_document(collection_name: str, data: Union[BaseModel, dict], database: Optional[Database] = None) -> str:
    """Insert a single document with timestamps and return its id as a string."""
    database = _require_db(database)
    if isinstance(data, BaseModel):
        data_dict = data.model_dump(exclude_none=True)
    else:
        data_dict = dict(data)

    now = datetime.now(timezone.utc)
    data_dict["created_at"] = now
    data_dict["updated_at"] = now

    result = database[collection_name].insert_one(data_dict)
    return str(result.inserted_id)


class MongoDirectory(DirectoryQuery):
    """Equality search over a collection, with one level of joined lookups."""

    def __init__(self, database: Optional[Database] = None):
        self._database = database

    def search(self, type: str, filters: List[Filter], columns: List[Column]) -> Iterator[SearchResult]:
        query = {}
        for f in filters:
            if f.operator != "is":
                raise DirectoryFault(f"Unsupported filter operator: {f.operator}")
            if f.field == "internalid":
                query["_id"] = as_object_id(f.value)
            else:
                query[f.field] = f.value

        database = self._database if self._database is not None else db
        if database is None:
            raise DirectoryFault("Database not available")
        try:
            for doc in database[type].find(query):
                yield SearchResult({col.key: self._column_value(database, doc, col) for col in columns})
        except PyMongoError as e:
            raise DirectoryFault(f"{type} search failed: {e}") from e

    def _column_value(self, database: Database, doc: dict, col: Column) -> Any:
        if col.join:
            if col.join not in JOINS:
                raise DirectoryFault(f"Unknown join: {col.join}")
            ref_field, collection = JOINS[col.join]
            ref = doc.get(ref_field)
            if ref is None:
                return None
            doc = database[collection].find_one({"_id": as_object_id(ref)}) or {}
        if col.name == "internalid":
            return str(doc["_id"]) if "_id" in doc else None
        return doc.get(col.name)


class MongoRecord(RecordHandle):
    def __init__(self, database: Optional[Database], type: str):
        self._database = database
        self.type = type
        self._values: Dict[str, Any] = {}

    def set_value(self, field: str, value: Any) -> None:
        self._values[field] = value

    def get_value(self, field: str) -> Any:
        return self._values.get(field)

    def save(self, enforce_required_fields: bool = False) -> str:
        if enforce_required_fields:
            missing = [f for f in REQUIRED_FIELDS.get(self.type, []) if self._values.get(f) in (None, "")]
            if missing:
                raise RequiredFieldsMissing(self.type, missing)

        doc = {k: as_object_id(v) if k in _REFERENCE_FIELDS else v for k, v in self._values.items()}
        database = self._database if self._database is not None else db
        if database is None:
            raise RecordWriteFault("Database not available")
        try:
            return create_document(self.type, doc, database=database)
        except PyMongoError as e:
            raise RecordWriteFault(f"{self.type} insert failed: {e}") from e


class MongoRecordStore(RecordStore):
    def __init__(self, database: Optional[Database] = None):
        self._database = database

    def create(self, type: str) -> MongoRecord:
        return MongoRecord(self._database, type)
