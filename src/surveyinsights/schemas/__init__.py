"""Pydantic schema definitions for survey records and query parameters."""

from __future__ import annotations

from .general import GeneralSurveyRecord
from .lawyer import LawyerSurveyRecord
from .query import GeneralListParams, LawyerListParams, LawyerSearchParams

__all__ = [
    "GeneralSurveyRecord",
    "LawyerSurveyRecord",
    "GeneralListParams",
    "LawyerListParams",
    "LawyerSearchParams",
]
