"""Request parameter models for listing and search."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LawyerListParams(BaseModel):
    """Pagination and equality filters for lawyer surveys."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    sort: str = "-createdAt"
    status: str | None = None
    interest_level: str | None = None

    model_config = ConfigDict(extra="forbid")


class GeneralListParams(BaseModel):
    """Pagination and equality filters for general surveys."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1)
    sort: str = "-submittedAt"
    nationality: str | None = None
    language: str | None = None

    model_config = ConfigDict(extra="forbid")


class LawyerSearchParams(BaseModel):
    """Free-text and range criteria for lawyer search."""

    name: str | None = None
    email: str | None = None
    mobile: str | None = None
    city: str | None = None
    min_compensation: float | None = Field(default=None, alias="minCompensation")
    max_compensation: float | None = Field(default=None, alias="maxCompensation")
    min_capacity: int | None = Field(default=None, alias="minCapacity")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)
