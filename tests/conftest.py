from __future__ import annotations

from typing import Any

import pendulum
import pytest

from surveyinsights.core import QueryEngine, SurveyService
from surveyinsights.store import InMemorySurveyStore

FIXED_NOW = pendulum.datetime(2025, 3, 1, 9, 30, tz="UTC")


def build_lawyer_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "professional_status": "محامي مستقل (freelancer)",
        "years_experience": "1-3 سنوات",
        "specializations": ["عمل"],
        "languages": ["العربية"],
        "written_consultations": 2,
        "labor_cases": 1,
        "family_cases": 0,
        "monthly_compensation": 5000,
        "discount_acceptance": "نعم، أقبل خصم 10-15%",
        "current_consultation_price": "201-300 ر.س",
        "most_important": "ضمان الدخل الشهري الثابت",
        "interest_level": "مهتم جداً - أريد التفاصيل فوراً",
    }
    payload.update(overrides)
    return payload


def build_general_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "surveySource": "Instagram",
        "nationality": "Filipino",
        "residenceYears": "3-5",
        "age": "25-34",
        "income": "3000-5000",
        "legalIssues": "Oo",
        "mainBarrier": "Cost",
        "quickDecision": "Yes",
        "giveawayInterest": "Oo",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def store() -> InMemorySurveyStore:
    return InMemorySurveyStore()


@pytest.fixture
def service(store: InMemorySurveyStore) -> SurveyService:
    return SurveyService(store, now_provider=lambda: FIXED_NOW)


@pytest.fixture
def engine(store: InMemorySurveyStore) -> QueryEngine:
    return QueryEngine(store)
