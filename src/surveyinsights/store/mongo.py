"""MongoDB-backed survey store."""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from bson import ObjectId
from pymongo import ASCENDING as MONGO_ASC
from pymongo import DESCENDING as MONGO_DESC
from pymongo import MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..errors import DuplicateSubmission, StoreFailure
from ..vocabulary import RecordKind
from .base import DESCENDING, RecordQuery

_INDEXES: dict[RecordKind, list[tuple[list[tuple[str, int]], dict[str, Any]]]] = {
    RecordKind.LAWYER: [
        (
            [("email", MONGO_ASC)],
            {"unique": True, "partialFilterExpression": {"email": {"$type": "string"}}},
        ),
        ([("mobile", MONGO_ASC)], {}),
        ([("interest_level", MONGO_ASC)], {}),
        ([("professional_status", MONGO_ASC)], {}),
        ([("status", MONGO_ASC)], {}),
        ([("createdAt", MONGO_DESC)], {}),
        ([("value_score", MONGO_DESC)], {}),
    ],
    RecordKind.GENERAL: [
        ([("nationality", MONGO_ASC)], {}),
        ([("submittedAt", MONGO_DESC)], {}),
        ([("legalIssues", MONGO_ASC)], {}),
    ],
}


class MongoSurveyStore:
    """``SurveyStore`` over a pymongo database handle."""

    def __init__(self, client: MongoClient, database: str):
        self._client = client
        self._db = client[database]
        self._logger = structlog.get_logger(__name__)

    @classmethod
    def from_uri(cls, uri: str, database: str, **client_options: Any) -> "MongoSurveyStore":
        client_options.setdefault("tz_aware", True)
        return cls(MongoClient(uri, **client_options), database)

    def ensure_indexes(self) -> None:
        with self._guard("ensure_indexes"):
            for kind, indexes in _INDEXES.items():
                collection = self._db[kind.collection]
                for keys, options in indexes:
                    collection.create_index(keys, **options)

    def insert(self, kind: RecordKind, document: dict[str, Any]) -> str:
        payload = {key: value for key, value in document.items() if key != "id"}
        try:
            with self._guard("insert"):
                result = self._db[kind.collection].insert_one(payload)
        except DuplicateKeyError as exc:
            raise DuplicateSubmission(str(payload.get("email") or "")) from exc
        return str(result.inserted_id)

    def get(self, kind: RecordKind, record_id: str) -> dict[str, Any] | None:
        object_id = _object_id(record_id)
        if object_id is None:
            return None
        with self._guard("get"):
            document = self._db[kind.collection].find_one({"_id": object_id})
        return _export(document)

    def find(self, kind: RecordKind, query: RecordQuery) -> list[dict[str, Any]]:
        with self._guard("find"):
            cursor = self._db[kind.collection].find(build_filter(query), build_projection(query))
            if query.sort:
                cursor = cursor.sort(
                    [(name, MONGO_DESC if direction == DESCENDING else MONGO_ASC) for name, direction in query.sort]
                )
            if query.skip:
                cursor = cursor.skip(query.skip)
            if query.limit is not None:
                cursor = cursor.limit(query.limit)
            return [_export(document) for document in cursor]

    def count(self, kind: RecordKind, query: RecordQuery) -> int:
        with self._guard("count"):
            return self._db[kind.collection].count_documents(build_filter(query))

    def update(self, kind: RecordKind, record_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        object_id = _object_id(record_id)
        if object_id is None:
            return None
        with self._guard("update"):
            document = self._db[kind.collection].find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        return _export(document)

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        object_id = _object_id(record_id)
        if object_id is None:
            return False
        with self._guard("delete"):
            result = self._db[kind.collection].delete_one({"_id": object_id})
        return result.deleted_count > 0

    def close(self) -> None:
        self._client.close()

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except DuplicateKeyError:
            raise
        except PyMongoError as exc:
            self._logger.error("store.failure", operation=operation, error=str(exc))
            raise StoreFailure(f"Store operation {operation!r} failed: {exc}") from exc


def build_filter(query: RecordQuery) -> dict[str, Any]:
    """Translate a ``RecordQuery`` into a MongoDB filter document."""
    conditions: dict[str, Any] = dict(query.equals)
    for name, needle in query.contains.items():
        conditions[name] = {"$regex": re.escape(needle), "$options": "i"}
    for name, needle in query.contains_exact.items():
        conditions[name] = {"$regex": re.escape(needle)}
    for name, (low, high) in query.ranges.items():
        bounds: dict[str, Any] = {}
        if low is not None:
            bounds["$gte"] = low
        if high is not None:
            bounds["$lte"] = high
        if bounds:
            conditions[name] = bounds
    return conditions


def build_projection(query: RecordQuery) -> dict[str, int] | None:
    """Projection for ``query.fields``; ``None`` returns whole documents."""
    names = [name for name in query.fields if name != "id"]
    if not names:
        return None
    return {name: 1 for name in names}


def mongo_store_resource(uri: str, database: str) -> Iterator[MongoSurveyStore]:
    """Container resource: open the client, ensure indexes, close on shutdown."""
    store = MongoSurveyStore.from_uri(uri, database)
    store.ensure_indexes()
    try:
        yield store
    finally:
        store.close()


def _object_id(record_id: str) -> ObjectId | None:
    if not ObjectId.is_valid(record_id):
        return None
    return ObjectId(record_id)


def _export(document: dict[str, Any] | None) -> dict[str, Any] | None:
    if document is None:
        return None
    exported = dict(document)
    exported["id"] = str(exported.pop("_id"))
    exported.pop("__v", None)
    return exported
