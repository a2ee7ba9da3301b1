"""Validation, derived metrics and aggregation engine."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .metrics import DerivedMetrics, DerivedMetricsCalculator, ValueScoreConfig
from .query import GeneralAnalytics, GroupCount, LawyerAnalytics, Page, QueryEngine
from .service import SubmissionReceipt, SurveyService
from .validation import FieldSpec, RecordValidator, general_validator, lawyer_validator

__all__ = [
    "DerivedMetrics",
    "DerivedMetricsCalculator",
    "ValueScoreConfig",
    "GeneralAnalytics",
    "GroupCount",
    "LawyerAnalytics",
    "Page",
    "QueryEngine",
    "SubmissionReceipt",
    "SurveyService",
    "FieldSpec",
    "RecordValidator",
    "general_validator",
    "lawyer_validator",
]
