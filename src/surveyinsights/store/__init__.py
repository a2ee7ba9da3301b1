"""Persistence handles for survey records."""

from __future__ import annotations

from .base import ASCENDING, DESCENDING, RecordQuery, SurveyStore
from .memory import InMemorySurveyStore

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "RecordQuery",
    "SurveyStore",
    "InMemorySurveyStore",
]
