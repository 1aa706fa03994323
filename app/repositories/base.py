"""
Base repository for MongoDB data access.

Driver failures never leave this layer unclassified: every PyMongoError is
converted into a StoreError carrying one ErrorKind.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.errors import ErrorKind, StoreError
from app.core.logger import logger

DUPLICATE_KEY_CODE = 11000


def classify_mongo_error(error: PyMongoError) -> ErrorKind:
    """Map a driver error onto the closed set of error kinds"""
    if isinstance(error, DuplicateKeyError) or getattr(error, "code", None) == DUPLICATE_KEY_CODE:
        return ErrorKind.DUPLICATE_KEY
    return ErrorKind.UNCLASSIFIED


def stringify_ids(value: Any) -> Any:
    """Recursively render ObjectIds as strings"""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [stringify_ids(v) for v in value]
    if isinstance(value, dict):
        return {k: stringify_ids(v) for k, v in value.items()}
    return value


class BaseRepository:
    """Shared helpers for the catalog repositories"""

    entity = "document"

    def __init__(self, collection: AsyncIOMotorCollection, related: Optional[AsyncIOMotorCollection] = None):
        self.collection = collection
        # Collection the stored references point into, used to populate them
        self.related = related

    @contextmanager
    def _translate_errors(self, operation: str, **context) -> Iterator[None]:
        try:
            yield
        except PyMongoError as e:
            kind = classify_mongo_error(e)
            details = {"operation": operation, "collection": self.entity, **context}
            if kind == ErrorKind.DUPLICATE_KEY:
                details["keyValue"] = stringify_ids(getattr(e, "details", None) or {}).get("keyValue")
            else:
                logger.error(
                    f"MongoDB error during {self.entity} {operation}",
                    error=e,
                    metadata=details
                )
            raise StoreError(kind, str(e), details) from e

    def _to_object_id(self, value: str) -> ObjectId:
        if not ObjectId.is_valid(value):
            raise StoreError(ErrorKind.VALIDATION, "Invalid MongoDB Id", {"id": value})
        return ObjectId(value)

    def _not_found(self, document_id: str) -> StoreError:
        return StoreError(
            ErrorKind.NOT_FOUND,
            f"The {self.entity} with the id {document_id} not exists in database",
            {"id": document_id},
        )

    @staticmethod
    def _to_plain(doc: Dict[str, Any]) -> Dict[str, Any]:
        """Convert a raw document into API-facing field values"""
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        doc.pop("__v", None)
        return stringify_ids(doc)

    async def _find_page(self, query: dict, skip: int, limit: int) -> Tuple[List[dict], int]:
        with self._translate_errors("list", skip=skip, limit=limit):
            total = await self.collection.count_documents(query)
            cursor = self.collection.find(query).skip(skip).limit(limit)
            docs = await cursor.to_list(length=limit)
        return docs, total

    async def _find_by_name(self, term: str) -> List[dict]:
        """Case-insensitive substring match on name. Callers reject pattern characters."""
        with self._translate_errors("search", term=term):
            cursor = self.collection.find({"name": {"$regex": term, "$options": "i"}})
            return await cursor.to_list(length=None)

    async def _lookup_related(self, ids: Iterable[ObjectId], fields: Iterable[str]) -> Dict[str, dict]:
        """
        Fetch the referenced documents in one query, keyed by string id.

        Only `fields` (plus the id) are read. Ids with no matching document
        are absent from the result.
        """
        ids = list(dict.fromkeys(ids))
        if not ids or self.related is None:
            return {}

        projection = {field: 1 for field in fields}
        with self._translate_errors("populate", count=len(ids)):
            cursor = self.related.find({"_id": {"$in": ids}}, projection)
            docs = await cursor.to_list(length=None)
        return {str(doc["_id"]): self._to_plain(doc) for doc in docs}

    async def _find_one(self, document_id: str) -> Optional[dict]:
        oid = self._to_object_id(document_id)
        with self._translate_errors("get", id=document_id):
            return await self.collection.find_one({"_id": oid})

    async def exists(self, document_id: str) -> bool:
        """Check if a document with this id exists"""
        if not ObjectId.is_valid(document_id):
            return False
        with self._translate_errors("exists", id=document_id):
            doc = await self.collection.find_one({"_id": ObjectId(document_id)}, {"_id": 1})
        return doc is not None
