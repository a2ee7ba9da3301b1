"""Lawyer survey record."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..vocabulary import DEFAULT_REVIEW_STATUS


class LawyerSurveyRecord(BaseModel):
    """Accepted lawyer survey with administrative and derived fields."""

    id: str | None = None
    submitted_at: datetime = Field(alias="submittedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    professional_status: str
    years_experience: str
    specializations: list[str] = Field(min_length=1)
    specializations_other: str | None = None
    languages: list[str] = Field(min_length=1)
    languages_other: str | None = None

    written_consultations: int = Field(ge=0)
    labor_cases: int = Field(ge=0)
    family_cases: int = Field(ge=0)

    monthly_compensation: int | float = Field(gt=0)
    discount_acceptance: str
    current_consultation_price: str

    most_important: str
    most_important_other: str | None = None
    biggest_challenge: str | None = None
    biggest_challenge_other: str | None = None

    interest_level: str
    questions_concerns: str | None = None

    name: str | None = None
    mobile: str | None = None
    email: str | None = None
    city: str | None = None

    status: str = DEFAULT_REVIEW_STATUS
    notes: Any = Field(default_factory=dict)

    total_monthly_capacity: int | None = None
    value_score: float | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    @property
    def has_contact_info(self) -> bool:
        return bool(self.email) or bool(self.mobile)

    def to_document(self) -> dict[str, Any]:
        """Return the store representation (timestamps camelCase, no id)."""
        return self.model_dump(by_alias=True, exclude={"id"})
