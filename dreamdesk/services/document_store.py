"""
Generic document store over MongoDB (Motor).

Collections are schemaless: callers pass plain dicts and get plain dicts
back, with the Mongo "_id" exposed as "id". One DocumentStore is built at
startup (see database.py) and handed to services through FastAPI
dependencies, so tests can build one over any Motor-compatible database.
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from dreamdesk.services.query import Constraint, build_mongo_query

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class StoreOperationError(Exception):
    """A store call failed (transport, permission or server error)."""

    def __init__(self, operation: str, collection: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.collection = collection
        self.cause = cause
        super().__init__(f"Store operation '{operation}' on '{collection}' failed: {cause}")


def _to_record(doc: Dict[str, Any]) -> Record:
    data = dict(doc)
    doc_id = data.pop("_id")
    return {"id": str(doc_id), **data}


def _strip_id(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in ("id", "_id")}


class DocumentStore:
    """
    CRUD and constrained queries against named collections.

    Every write is awaited until the server acknowledges it. Nothing is
    retried: a failure surfaces once as StoreOperationError.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        self.database = database

    def _collection(self, name: str):
        return self.database[name]

    async def create(self, collection: str, data: Dict[str, Any], id: Optional[str] = None) -> Record:
        """Insert a document. With an explicit id an existing document is replaced."""
        body = _strip_id(data)
        try:
            if id is not None:
                await self._collection(collection).replace_one({"_id": id}, body, upsert=True)
                doc_id = id
            else:
                doc_id = uuid.uuid4().hex
                await self._collection(collection).insert_one({"_id": doc_id, **body})
        except PyMongoError as e:
            logger.error("create on %s failed: %s", collection, e)
            raise StoreOperationError("create", collection, e) from e
        logger.debug("Created %s/%s", collection, doc_id)
        return {"id": doc_id, **body}

    async def get_by_id(self, collection: str, id: str) -> Optional[Record]:
        try:
            doc = await self._collection(collection).find_one({"_id": id})
        except PyMongoError as e:
            logger.error("get_by_id on %s failed: %s", collection, e)
            raise StoreOperationError("get_by_id", collection, e) from e
        return _to_record(doc) if doc else None

    async def get_all(self, collection: str, constraints: Iterable[Constraint] = ()) -> List[Record]:
        """Return every document matching the constraints, in the requested order."""
        mongo_filter, sort, max_count = build_mongo_query(constraints)
        try:
            cursor = self._collection(collection).find(mongo_filter)
            if sort:
                cursor = cursor.sort(sort)
            if max_count is not None:
                cursor = cursor.limit(max_count)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("get_all on %s failed: %s", collection, e)
            raise StoreOperationError("get_all", collection, e) from e
        return [_to_record(d) for d in docs]

    async def update(self, collection: str, id: str, data: Dict[str, Any]) -> None:
        """Set the given fields on an existing document; other fields are untouched."""
        body = _strip_id(data)
        if not body:
            return
        try:
            await self._collection(collection).update_one({"_id": id}, {"$set": body})
        except PyMongoError as e:
            logger.error("update on %s/%s failed: %s", collection, id, e)
            raise StoreOperationError("update", collection, e) from e

    async def delete(self, collection: str, id: str) -> None:
        try:
            await self._collection(collection).delete_one({"_id": id})
        except PyMongoError as e:
            logger.error("delete on %s/%s failed: %s", collection, id, e)
            raise StoreOperationError("delete", collection, e) from e

    async def delete_where(self, collection: str, constraints: Iterable[Constraint]) -> int:
        """Delete every document matching the constraints in one server call."""
        mongo_filter, _, _ = build_mongo_query(constraints)
        if not mongo_filter:
            raise ValueError("delete_where requires at least one Where constraint")
        try:
            result = await self._collection(collection).delete_many(mongo_filter)
        except PyMongoError as e:
            logger.error("delete_where on %s failed: %s", collection, e)
            raise StoreOperationError("delete_where", collection, e) from e
        return result.deleted_count

    async def increment(
        self,
        collection: str,
        id: str,
        field: str,
        delta: int,
        extra: Optional[Dict[str, Any]] = None,
        floor: Optional[int] = 0,
    ) -> bool:
        """
        Atomically add delta to a numeric field.

        Decrements only match while the field is above floor, so concurrent
        writers can never push the value below it. Returns False when no
        document was changed (missing document, or already at the floor).
        """
        mongo_filter: Dict[str, Any] = {"_id": id}
        if delta < 0 and floor is not None:
            mongo_filter[field] = {"$gte": floor - delta}
        update: Dict[str, Any] = {"$inc": {field: delta}}
        if extra:
            update["$set"] = _strip_id(extra)
        try:
            result = await self._collection(collection).update_one(mongo_filter, update)
        except PyMongoError as e:
            logger.error("increment on %s/%s failed: %s", collection, id, e)
            raise StoreOperationError("increment", collection, e) from e
        return result.modified_count > 0
