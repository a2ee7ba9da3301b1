from __future__ import annotations

from surveyinsights.store import RecordQuery
from surveyinsights.store.mongo import build_filter, build_projection


def test_build_filter_translates_every_criterion():
    query = RecordQuery(
        equals={"status": "pending"},
        contains={"name": "sa.ra"},
        contains_exact={"mobile": "055"},
        ranges={"monthly_compensation": (4000, None), "total_monthly_capacity": (None, 10)},
    )

    assert build_filter(query) == {
        "status": "pending",
        "name": {"$regex": r"sa\.ra", "$options": "i"},
        "mobile": {"$regex": "055"},
        "monthly_compensation": {"$gte": 4000},
        "total_monthly_capacity": {"$lte": 10},
    }


def test_build_filter_empty_query_matches_everything():
    assert build_filter(RecordQuery()) == {}


def test_build_projection_keeps_requested_fields():
    assert build_projection(RecordQuery(fields=("id", "nationality", "legalIssues"))) == {
        "nationality": 1,
        "legalIssues": 1,
    }
    assert build_projection(RecordQuery()) is None
