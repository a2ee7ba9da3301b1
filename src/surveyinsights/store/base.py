"""Store contract and query description."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from ..vocabulary import RecordKind

ASCENDING = 1
DESCENDING = -1


@dataclass(slots=True)
class RecordQuery:
    """Store-neutral description of a filtered, sorted, bounded read.

    ``contains`` matches case-insensitively, ``contains_exact`` keeps case;
    both treat the needle literally. ``ranges`` bounds are inclusive.
    A non-empty ``fields`` limits returned documents to those keys plus ``id``.
    """

    equals: dict[str, Any] = field(default_factory=dict)
    contains: dict[str, str] = field(default_factory=dict)
    contains_exact: dict[str, str] = field(default_factory=dict)
    ranges: dict[str, tuple[float | None, float | None]] = field(default_factory=dict)
    sort: list[tuple[str, int]] = field(default_factory=list)
    skip: int = 0
    limit: int | None = None
    fields: tuple[str, ...] = ()


@runtime_checkable
class SurveyStore(Protocol):
    """Persistence contract used by the service and the query engine.

    Documents are plain mappings carrying their identifier under ``id``.
    """

    def insert(self, kind: RecordKind, document: dict[str, Any]) -> str:
        """Persist a new document and return its identifier."""

    def get(self, kind: RecordKind, record_id: str) -> dict[str, Any] | None:
        """Return one document or ``None``."""

    def find(self, kind: RecordKind, query: RecordQuery) -> list[dict[str, Any]]:
        """Return documents matching ``query`` in its sort order."""

    def count(self, kind: RecordKind, query: RecordQuery) -> int:
        """Count documents matching the filters of ``query``."""

    def update(self, kind: RecordKind, record_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Set fields on one document and return it, or ``None`` when absent."""

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        """Remove one document; return whether it existed."""

    def close(self) -> None:
        """Release the underlying resources."""

