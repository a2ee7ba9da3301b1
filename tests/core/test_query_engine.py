from __future__ import annotations

import pytest

from conftest import build_general_payload, build_lawyer_payload
from surveyinsights.core import QueryEngine, SurveyService
from surveyinsights.core.query import format_percentage, parse_sort
from surveyinsights.schemas import GeneralListParams, LawyerListParams, LawyerSearchParams
from surveyinsights.store import ASCENDING, DESCENDING

INTERESTED = "مهتم - أريد معرفة المزيد"
NOT_INTERESTED = "غير مهتم حالياً"
FIRM_PARTNER = "شريك في مكتب محاماة (2-5 محامين)"


def seed_lawyers(service: SurveyService) -> list[str]:
    payloads = [
        build_lawyer_payload(name="Sara Ahmed", email="sara@firm.sa", city="Riyadh", monthly_compensation=3000),
        build_lawyer_payload(
            name="Omar", mobile="0551234567", city="Jeddah", monthly_compensation=6000,
            written_consultations=10, interest_level=INTERESTED, professional_status=FIRM_PARTNER,
        ),
        build_lawyer_payload(
            name="Huda", city="riyadh", monthly_compensation=4000, family_cases=5,
            interest_level=NOT_INTERESTED,
        ),
    ]
    return [service.submit_lawyer(payload).id for payload in payloads]


def test_parse_sort_handles_direction_and_defaults():
    assert parse_sort("-createdAt name", "-x") == [("createdAt", DESCENDING), ("name", ASCENDING)]
    assert parse_sort("", "-submittedAt") == [("submittedAt", DESCENDING)]
    assert parse_sort("+value_score,-city", "-x") == [("value_score", ASCENDING), ("city", DESCENDING)]


def test_format_percentage():
    assert format_percentage(0, 0) == "0.00"
    assert format_percentage(1, 3) == "33.33"


def test_list_lawyers_paginates_and_filters(service: SurveyService, engine: QueryEngine):
    seed_lawyers(service)

    page = engine.list_lawyer_surveys(LawyerListParams(page=2, limit=2, sort="name"))
    assert page.total == 3
    assert page.total_pages == 2
    assert page.current_page == 2
    assert [record.name for record in page.data] == ["Sara Ahmed"]

    filtered = engine.list_lawyer_surveys(LawyerListParams(interest_level=NOT_INTERESTED))
    assert filtered.total == 1
    assert filtered.data[0].name == "Huda"


def test_list_general_filters_by_nationality(service: SurveyService, engine: QueryEngine):
    service.submit_general(build_general_payload(nationality="Filipino", submittedAt="2025-01-01T00:00:00Z"))
    service.submit_general(build_general_payload(nationality="Indian", submittedAt="2025-02-01T00:00:00Z"))
    service.submit_general(build_general_payload(nationality="Filipino", submittedAt="2025-03-01T00:00:00Z"))

    page = engine.list_general_surveys(GeneralListParams(nationality="Filipino"))

    assert page.total == 2
    assert page.total_pages == 1
    assert [record.submitted_at.month for record in page.data] == [3, 1]
    rendered = page.to_dict()
    assert rendered["currentPage"] == 1
    assert rendered["data"][0]["nationality"] == "Filipino"


def test_search_by_min_compensation_sorted_by_value(service: SurveyService, engine: QueryEngine):
    seed_lawyers(service)

    results = engine.search_lawyer_surveys(LawyerSearchParams(minCompensation=4000))

    assert [record.name for record in results] == ["Omar", "Huda"]
    assert all(record.monthly_compensation >= 4000 for record in results)
    scores = [record.value_score for record in results]
    assert scores == sorted(scores, reverse=True)


def test_search_text_filters(service: SurveyService, engine: QueryEngine):
    seed_lawyers(service)

    by_city = engine.search_lawyer_surveys(LawyerSearchParams(city="RIYADH"))
    assert {record.name for record in by_city} == {"Sara Ahmed", "Huda"}

    by_mobile = engine.search_lawyer_surveys(LawyerSearchParams(mobile="55123"))
    assert [record.name for record in by_mobile] == ["Omar"]

    by_capacity = engine.search_lawyer_surveys(LawyerSearchParams(minCapacity=8))
    assert {record.name for record in by_capacity} == {"Omar", "Huda"}

    literal = engine.search_lawyer_surveys(LawyerSearchParams(name=".*"))
    assert literal == []


def test_search_is_capped(service: SurveyService, store):
    for _ in range(4):
        service.submit_lawyer(build_lawyer_payload())

    engine = QueryEngine(store, search_limit=3)

    assert len(engine.search_lawyer_surveys(LawyerSearchParams())) == 3


def test_lawyer_analytics_summary(service: SurveyService, engine: QueryEngine):
    ids = seed_lawyers(service)

    summary = engine.lawyer_analytics()

    assert summary.total == 3
    assert summary.highly_interested == 2
    assert summary.with_contact_info == 2
    assert summary.averages["written_consultations"] == pytest.approx(14 / 3)
    assert summary.averages["monthly_compensation"] == pytest.approx(13000 / 3)
    statuses = {group.value: group.count for group in summary.by_professional_status}
    assert statuses == {"محامي مستقل (freelancer)": 2, FIRM_PARTNER: 1}
    assert [group.count for group in summary.by_interest_level] == [1, 1, 1]
    assert summary.top_value_lawyers[0]["id"] == ids[1]
    assert set(summary.top_value_lawyers[0]) == {
        "id", "name", "email", "mobile", "professional_status",
        "value_score", "total_monthly_capacity", "interest_level",
    }


def test_top_value_ties_keep_insertion_order(service: SurveyService, engine: QueryEngine):
    ids = [service.submit_lawyer(build_lawyer_payload(name=f"L{i}")).id for i in range(12)]

    summary = engine.lawyer_analytics()

    assert [entry["id"] for entry in summary.top_value_lawyers] == ids[:10]


def test_general_analytics_summary(service: SurveyService, engine: QueryEngine):
    service.submit_general(build_general_payload(legalIssues="Yes", giveawayInterest="Yes, I would", nationality="Indian"))
    service.submit_general(build_general_payload(legalIssues="لا", giveawayInterest="نعم، أرغب"))
    service.submit_general(build_general_payload(legalIssues="हाँ", giveawayInterest="Maybe later"))
    service.submit_general(build_general_payload(legalIssues="No", giveawayInterest="No"))

    summary = engine.general_analytics()

    assert summary.total == 4
    assert summary.legal_issues_yes == 2
    assert summary.legal_issues_percentage == "50.00"
    assert summary.giveaway_interested == 2
    assert [(group.value, group.count) for group in summary.nationality_breakdown] == [
        ("Filipino", 3),
        ("Indian", 1),
    ]


def test_analytics_over_empty_store(engine: QueryEngine):
    lawyer = engine.lawyer_analytics()
    general = engine.general_analytics()

    assert lawyer.total == 0
    assert lawyer.by_interest_level == []
    assert lawyer.by_professional_status == []
    assert lawyer.averages == {
        "written_consultations": 0.0,
        "labor_cases": 0.0,
        "family_cases": 0.0,
        "monthly_compensation": 0.0,
    }
    assert lawyer.top_value_lawyers == []
    assert general.total == 0
    assert general.legal_issues_percentage == "0.00"
    assert general.nationality_breakdown == []
    assert lawyer.to_dict()["avgCapacity"]["avgCompensation"] == 0.0


def test_listing_empty_store(engine: QueryEngine):
    page = engine.list_lawyer_surveys()

    assert page.total == 0
    assert page.total_pages == 0
    assert page.data == []
