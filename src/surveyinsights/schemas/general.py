"""General respondent survey record."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GeneralSurveyRecord(BaseModel):
    """Accepted answers from a general respondent.

    Field names follow the stored camelCase keys through aliases so the
    same model reads submissions, store documents and API payloads.
    """

    id: str | None = None
    submitted_at: datetime = Field(alias="submittedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    survey_source: str = Field(alias="surveySource")
    survey_source_other: str | None = Field(default=None, alias="surveySourceOther")
    nationality: str
    residence_years: str = Field(alias="residenceYears")
    age: str
    income: str

    legal_issues: str = Field(alias="legalIssues")
    main_barrier: str = Field(alias="mainBarrier")

    quick_decision: str = Field(alias="quickDecision")
    giveaway_interest: str = Field(alias="giveawayInterest")
    email: str | None = None
    phone: str | None = None

    legal_tech_services: str | None = Field(default=None, alias="legalTechServices")
    legal_tech_service_name: str | None = Field(default=None, alias="legalTechServiceName")
    legal_tech_consideration: str | None = Field(default=None, alias="legalTechConsideration")

    language: str = "en"
    ip_address: str | None = Field(default=None, alias="ipAddress")

    # Free-form answers may arrive as JSON numbers ("age": 30).
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    def to_document(self) -> dict:
        """Return the store representation (camelCase keys, no id)."""
        return self.model_dump(by_alias=True, exclude={"id"})
