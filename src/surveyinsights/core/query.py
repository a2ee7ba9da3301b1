"""Listing, search and analytics over stored survey records."""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar

import structlog
from pydantic import BaseModel

from ..schemas import (
    GeneralListParams,
    GeneralSurveyRecord,
    LawyerListParams,
    LawyerSearchParams,
    LawyerSurveyRecord,
)
from ..store import ASCENDING, DESCENDING, RecordQuery, SurveyStore
from ..vocabulary import (
    GIVEAWAY_ANSWERS,
    LEGAL_ISSUES_ANSWERS,
    RecordKind,
    count_affirmative,
    is_highly_interested,
)

RecordT = TypeVar("RecordT", bound=BaseModel)

TOP_VALUE_FIELDS = (
    "id",
    "name",
    "email",
    "mobile",
    "professional_status",
    "value_score",
    "total_monthly_capacity",
    "interest_level",
)

AVERAGED_FIELDS = (
    "written_consultations",
    "labor_cases",
    "family_cases",
    "monthly_compensation",
)

LAWYER_ANALYTICS_FIELDS = tuple(
    dict.fromkeys((*TOP_VALUE_FIELDS, *AVERAGED_FIELDS, "professional_status", "interest_level"))
)
GENERAL_ANALYTICS_FIELDS = ("legalIssues", "giveawayInterest", "nationality")

_SORT_SEPARATOR = re.compile(r"[\s,]+")


@dataclass(slots=True)
class Page(Generic[RecordT]):
    """One page of a filtered listing."""

    data: list[RecordT]
    total: int
    total_pages: int
    current_page: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [item.model_dump(mode="json", by_alias=True) for item in self.data],
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "total": self.total,
        }


@dataclass(slots=True)
class GroupCount:
    value: Any
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"_id": self.value, "count": self.count}


@dataclass(slots=True)
class LawyerAnalytics:
    """Aggregate view across every lawyer survey."""

    total: int
    by_interest_level: list[GroupCount]
    by_professional_status: list[GroupCount]
    averages: dict[str, float]
    highly_interested: int
    with_contact_info: int
    top_value_lawyers: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "byInterestLevel": [group.to_dict() for group in self.by_interest_level],
            "byProfessionalStatus": [group.to_dict() for group in self.by_professional_status],
            "avgCapacity": {
                "avgConsultations": self.averages["written_consultations"],
                "avgLaborCases": self.averages["labor_cases"],
                "avgFamilyCases": self.averages["family_cases"],
                "avgCompensation": self.averages["monthly_compensation"],
            },
            "highlyInterested": self.highly_interested,
            "withContactInfo": self.with_contact_info,
            "topValueLawyers": self.top_value_lawyers,
        }


@dataclass(slots=True)
class GeneralAnalytics:
    """Aggregate view across every general survey."""

    total: int
    legal_issues_yes: int
    legal_issues_percentage: str
    giveaway_interested: int
    nationality_breakdown: list[GroupCount]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSurveys": self.total,
            "legalIssuesYes": self.legal_issues_yes,
            "legalIssuesPercentage": self.legal_issues_percentage,
            "giveawayInterested": self.giveaway_interested,
            "nationalityBreakdown": [group.to_dict() for group in self.nationality_breakdown],
        }


def parse_sort(spec: str | None, default: str) -> list[tuple[str, int]]:
    """Parse a ``-field other`` style sort specification."""
    tokens = [token for token in _SORT_SEPARATOR.split(spec or "") if token]
    if not tokens:
        tokens = [token for token in _SORT_SEPARATOR.split(default) if token]
    order: list[tuple[str, int]] = []
    for token in tokens:
        if token.startswith("-"):
            name, direction = token[1:], DESCENDING
        else:
            name, direction = token.lstrip("+"), ASCENDING
        if name:
            order.append((name, direction))
    return order


def group_counts(values: Iterable[Any]) -> list[GroupCount]:
    """Count occurrences, most frequent first; ties keep first-seen order."""
    counter = Counter(values)
    return [GroupCount(value, count) for value, count in counter.most_common()]


def format_percentage(part: int, whole: int) -> str:
    if not whole:
        return "0.00"
    return f"{part / whole * 100:.2f}"


class QueryEngine:
    """Read-only query and aggregation over a ``SurveyStore`` handle."""

    def __init__(
        self,
        store: SurveyStore,
        *,
        search_limit: int = 50,
        top_value_limit: int = 10,
    ) -> None:
        self._store = store
        self._search_limit = search_limit
        self._top_value_limit = top_value_limit
        self._logger = structlog.get_logger(__name__)

    def list_lawyer_surveys(self, params: LawyerListParams | None = None) -> Page[LawyerSurveyRecord]:
        params = params or LawyerListParams()
        equals = {
            name: value
            for name, value in (("status", params.status), ("interest_level", params.interest_level))
            if value
        }
        return self._paginate(
            RecordKind.LAWYER,
            LawyerSurveyRecord,
            equals=equals,
            sort=parse_sort(params.sort, "-createdAt"),
            page=params.page,
            limit=params.limit,
        )

    def list_general_surveys(self, params: GeneralListParams | None = None) -> Page[GeneralSurveyRecord]:
        params = params or GeneralListParams()
        equals = {
            name: value
            for name, value in (("nationality", params.nationality), ("language", params.language))
            if value
        }
        return self._paginate(
            RecordKind.GENERAL,
            GeneralSurveyRecord,
            equals=equals,
            sort=parse_sort(params.sort, "-submittedAt"),
            page=params.page,
            limit=params.limit,
        )

    def search_lawyer_surveys(self, params: LawyerSearchParams) -> list[LawyerSurveyRecord]:
        query = RecordQuery(sort=[("value_score", DESCENDING)], limit=self._search_limit)
        for name in ("name", "email", "city"):
            needle = getattr(params, name)
            if needle:
                query.contains[name] = needle
        if params.mobile:
            query.contains_exact["mobile"] = params.mobile
        if params.min_compensation is not None or params.max_compensation is not None:
            query.ranges["monthly_compensation"] = (params.min_compensation, params.max_compensation)
        if params.min_capacity is not None:
            query.ranges["total_monthly_capacity"] = (params.min_capacity, None)

        documents = self._store.find(RecordKind.LAWYER, query)
        self._logger.debug("query.search", matched=len(documents))
        return [LawyerSurveyRecord.model_validate(document) for document in documents]

    def lawyer_analytics(self) -> LawyerAnalytics:
        documents = self._store.find(RecordKind.LAWYER, RecordQuery(fields=LAWYER_ANALYTICS_FIELDS))
        total = len(documents)

        averages = {name: _mean(document.get(name) for document in documents) for name in AVERAGED_FIELDS}

        # sorted() is stable, so equal scores keep insertion order.
        ranked = sorted(documents, key=lambda document: _score(document.get("value_score")), reverse=True)
        top_value = [
            {name: document.get(name) for name in TOP_VALUE_FIELDS}
            for document in ranked[: self._top_value_limit]
        ]

        return LawyerAnalytics(
            total=total,
            by_interest_level=group_counts(document.get("interest_level") for document in documents),
            by_professional_status=group_counts(document.get("professional_status") for document in documents),
            averages=averages,
            highly_interested=sum(1 for document in documents if is_highly_interested(document.get("interest_level"))),
            with_contact_info=sum(1 for document in documents if document.get("email") or document.get("mobile")),
            top_value_lawyers=top_value,
        )

    def general_analytics(self) -> GeneralAnalytics:
        documents = self._store.find(RecordKind.GENERAL, RecordQuery(fields=GENERAL_ANALYTICS_FIELDS))
        total = len(documents)
        legal_issues_yes = count_affirmative(
            (document.get("legalIssues") for document in documents), LEGAL_ISSUES_ANSWERS
        )
        return GeneralAnalytics(
            total=total,
            legal_issues_yes=legal_issues_yes,
            legal_issues_percentage=format_percentage(legal_issues_yes, total),
            giveaway_interested=count_affirmative(
                (document.get("giveawayInterest") for document in documents), GIVEAWAY_ANSWERS
            ),
            nationality_breakdown=group_counts(document.get("nationality") for document in documents),
        )

    def all_lawyer_surveys(self) -> list[LawyerSurveyRecord]:
        documents = self._store.find(RecordKind.LAWYER, RecordQuery(sort=[("createdAt", ASCENDING)]))
        return [LawyerSurveyRecord.model_validate(document) for document in documents]

    def _paginate(
        self,
        kind: RecordKind,
        model: type[RecordT],
        *,
        equals: dict[str, Any],
        sort: list[tuple[str, int]],
        page: int,
        limit: int,
    ) -> Page[RecordT]:
        query = RecordQuery(equals=equals, sort=sort, skip=(page - 1) * limit, limit=limit)
        total = self._store.count(kind, query)
        documents = self._store.find(kind, query)
        return Page(
            data=[model.model_validate(document) for document in documents],
            total=total,
            total_pages=math.ceil(total / limit),
            current_page=page,
        )


def _mean(values: Iterable[Any]) -> float:
    numbers = [value for value in values if isinstance(value, (int, float)) and not isinstance(value, bool)]
    if not numbers:
        return 0.0
    return sum(numbers) / len(numbers)


def _score(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return float("-inf")
