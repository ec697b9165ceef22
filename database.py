"""
MongoDB document store.

A ``DocumentStore`` is built once by the app factory, connected in the app
lifespan and handed to resolvers through the GraphQL context. Every pymongo
failure is re-raised as ``QueryError`` so resolvers only deal with the
error taxonomy.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from bson import ObjectId
from pymongo import MongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from errors import QueryError

logger = logging.getLogger(__name__)

Sort = Sequence[Tuple[str, int]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentStore:
    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        name: str = "taskboard",
        timeout_ms: int = 5000,
        client: Optional[Any] = None,
        retry_interval: float = 10.0,
    ):
        self.url = url
        self.name = name
        self.timeout_ms = timeout_ms
        self._client = client
        self._owns_client = client is None
        self._db = None
        self.retry_interval = retry_interval
        # set after a failed connect; None means no retry is scheduled
        self._next_retry: Optional[float] = None

    @property
    def connected(self) -> bool:
        return self._db is not None

    def connect(self) -> bool:
        """Open the connection. Failures are logged, not raised."""
        if self._db is not None:
            return True
        try:
            if self._client is None:
                self._client = MongoClient(self.url, serverSelectionTimeoutMS=self.timeout_ms)
                # Injected clients are assumed live; our own one must answer.
                self._client.admin.command("ping")
            self._db = self._client[self.name]
            self._next_retry = None
            logger.info("Connected to MongoDB database '%s'", self.name)
            return True
        except PyMongoError as e:
            logger.error("MongoDB connection failed: %s", e)
            if self._owns_client and self._client is not None:
                self._client.close()
                self._client = None
            self._db = None
            self._next_retry = time.monotonic() + self.retry_interval
            return False

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None
        self._db = None
        self._next_retry = None

    def ensure_connected(self) -> bool:
        """True when usable; a failed connection is retried once per ``retry_interval``."""
        if self._db is None and self._next_retry is not None and time.monotonic() >= self._next_retry:
            self.connect()
        return self._db is not None

    @property
    def db(self):
        if not self.ensure_connected():
            raise QueryError("Database not available")
        return self._db

    def collection(self, name: str):
        return self.db[name]

    def list_collection_names(self) -> List[str]:
        try:
            return self.db.list_collection_names()
        except PyMongoError as e:
            raise QueryError(f"Error listing collections: {e}")

    # -----------------------------
    # CRUD helpers
    # -----------------------------

    def create_document(self, collection_name: str, data: Dict[str, Any]) -> str:
        """Insert ``data`` stamped with created_at/updated_at; returns the new id."""
        now = utcnow()
        doc = {**data, "created_at": now, "updated_at": now}
        try:
            result = self.collection(collection_name).insert_one(doc)
        except PyMongoError as e:
            logger.error("Insert into %s failed: %s", collection_name, e)
            raise QueryError(f"Error creating {collection_name}: {e}")
        return str(result.inserted_id)

    def get_documents(
        self,
        collection_name: str,
        filter_dict: Optional[Dict[str, Any]] = None,
        sort: Optional[Sort] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection(collection_name).find(filter_dict or {})
            if sort:
                cursor = cursor.sort(list(sort))
            if limit:
                cursor = cursor.limit(limit)
            return list(cursor)
        except PyMongoError as e:
            logger.error("Query on %s failed: %s", collection_name, e)
            raise QueryError(f"Error fetching {collection_name}: {e}")

    def find_one(self, collection_name: str, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return self.collection(collection_name).find_one(filter_dict)
        except PyMongoError as e:
            logger.error("Lookup on %s failed: %s", collection_name, e)
            raise QueryError(f"Error fetching {collection_name}: {e}")

    def find_by_id(self, collection_name: str, oid: ObjectId) -> Optional[Dict[str, Any]]:
        return self.find_one(collection_name, {"_id": oid})

    def find_by_ids(self, collection_name: str, oids: Iterable[ObjectId]) -> List[Dict[str, Any]]:
        """Fetch documents for ``oids`` keeping their order; missing ones are skipped."""
        oids = list(oids)
        if not oids:
            return []
        docs = self.get_documents(collection_name, {"_id": {"$in": oids}})
        by_id = {d["_id"]: d for d in docs}
        return [by_id[o] for o in oids if o in by_id]

    def exists(self, collection_name: str, oid: ObjectId) -> bool:
        return self.find_one(collection_name, {"_id": oid}) is not None

    def update_by_id(self, collection_name: str, oid: ObjectId, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """``$set`` the given fields and return the updated document, or None."""
        update = {**changes, "updated_at": utcnow()}
        try:
            return self.collection(collection_name).find_one_and_update(
                {"_id": oid},
                {"$set": update},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Update on %s failed: %s", collection_name, e)
            raise QueryError(f"Error updating {collection_name}: {e}")

    def add_to_set(self, collection_name: str, oid: ObjectId, field: str, value: Any) -> None:
        try:
            self.collection(collection_name).update_one(
                {"_id": oid},
                {"$addToSet": {field: value}, "$set": {"updated_at": utcnow()}},
            )
        except PyMongoError as e:
            raise QueryError(f"Error updating {collection_name}: {e}")

    def pull(self, collection_name: str, oid: ObjectId, field: str, value: Any) -> None:
        try:
            self.collection(collection_name).update_one(
                {"_id": oid},
                {"$pull": {field: value}, "$set": {"updated_at": utcnow()}},
            )
        except PyMongoError as e:
            raise QueryError(f"Error updating {collection_name}: {e}")

    def update_many(self, collection_name: str, filter_dict: Dict[str, Any], changes: Dict[str, Any]) -> int:
        try:
            res = self.collection(collection_name).update_many(
                filter_dict, {"$set": {**changes, "updated_at": utcnow()}}
            )
        except PyMongoError as e:
            logger.error("Bulk update on %s failed: %s", collection_name, e)
            raise QueryError(f"Error updating {collection_name}: {e}")
        return res.modified_count

    def delete_by_id(self, collection_name: str, oid: ObjectId) -> Optional[Dict[str, Any]]:
        """Delete and return the removed document, or None if it did not exist."""
        try:
            return self.collection(collection_name).find_one_and_delete({"_id": oid})
        except PyMongoError as e:
            logger.error("Delete on %s failed: %s", collection_name, e)
            raise QueryError(f"Error deleting {collection_name}: {e}")
