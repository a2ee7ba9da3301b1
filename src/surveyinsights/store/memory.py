"""Process-local store used for tests and single-process runs."""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from ..vocabulary import RecordKind
from .base import DESCENDING, RecordQuery


class InMemorySurveyStore:
    """Dictionary-backed ``SurveyStore`` preserving insertion order."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, kind: RecordKind) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(kind.collection, {})

    def insert(self, kind: RecordKind, document: dict[str, Any]) -> str:
        record_id = uuid.uuid4().hex
        stored = copy.deepcopy(document)
        stored.pop("id", None)
        self._collection(kind)[record_id] = stored
        return record_id

    def get(self, kind: RecordKind, record_id: str) -> dict[str, Any] | None:
        stored = self._collection(kind).get(record_id)
        if stored is None:
            return None
        return _export(record_id, stored)

    def find(self, kind: RecordKind, query: RecordQuery) -> list[dict[str, Any]]:
        matched = list(self._matching(kind, query))
        for name, direction in reversed(query.sort):
            matched.sort(key=lambda item: _sort_key(item[1].get(name)), reverse=direction == DESCENDING)
        window = matched[query.skip:]
        if query.limit is not None:
            window = window[: query.limit]
        return [_export(record_id, stored, query.fields) for record_id, stored in window]

    def count(self, kind: RecordKind, query: RecordQuery) -> int:
        return sum(1 for _ in self._matching(kind, query))

    def update(self, kind: RecordKind, record_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        stored = self._collection(kind).get(record_id)
        if stored is None:
            return None
        stored.update(copy.deepcopy(changes))
        return _export(record_id, stored)

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        return self._collection(kind).pop(record_id, None) is not None

    def close(self) -> None:
        self._collections.clear()

    def _matching(self, kind: RecordKind, query: RecordQuery) -> Iterable[tuple[str, dict[str, Any]]]:
        for record_id, stored in self._collection(kind).items():
            if _matches(stored, query):
                yield record_id, stored


def _matches(document: dict[str, Any], query: RecordQuery) -> bool:
    for name, expected in query.equals.items():
        if document.get(name) != expected:
            return False
    for name, needle in query.contains.items():
        value = document.get(name)
        if not isinstance(value, str) or needle.casefold() not in value.casefold():
            return False
    for name, needle in query.contains_exact.items():
        value = document.get(name)
        if not isinstance(value, str) or needle not in value:
            return False
    for name, (low, high) in query.ranges.items():
        value = document.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
    return True


def _sort_key(value: Any) -> tuple[int, Any]:
    # Missing values sort before everything else, as in MongoDB.
    if value is None:
        return (0, 0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (3, value)
    return (4, str(value))


def _export(record_id: str, stored: dict[str, Any], fields: tuple[str, ...] = ()) -> dict[str, Any]:
    if fields:
        stored = {name: stored[name] for name in fields if name in stored}
    document = copy.deepcopy(stored)
    document["id"] = record_id
    return document
