from __future__ import annotations

import pytest
from pymongo.errors import DuplicateKeyError, PyMongoError
from structlog.testing import capture_logs

from surveyinsights.errors import DuplicateSubmission, StoreFailure
from surveyinsights.store import RecordQuery
from surveyinsights.store.mongo import MongoSurveyStore
from surveyinsights.vocabulary import RecordKind


class FakeCollection:
    def __init__(self, error: Exception) -> None:
        self.error = error

    def insert_one(self, document):
        raise self.error

    def find(self, *args, **kwargs):
        raise self.error

    def count_documents(self, *args, **kwargs):
        raise self.error


class FakeClient:
    def __init__(self, error: Exception) -> None:
        self.collection = FakeCollection(error)
        self.closed = False

    def __getitem__(self, name):
        return {RecordKind.LAWYER.collection: self.collection, RecordKind.GENERAL.collection: self.collection}

    def close(self) -> None:
        self.closed = True


def test_duplicate_key_on_insert_becomes_duplicate_submission():
    store = MongoSurveyStore(FakeClient(DuplicateKeyError("E11000 duplicate key error")), "survey")

    with pytest.raises(DuplicateSubmission) as exc:
        store.insert(RecordKind.LAWYER, {"email": "taken@firm.sa", "name": "Sara"})

    assert exc.value.to_dict()["kind"] == "duplicate_submission"
    assert exc.value.email == "taken@firm.sa"


def test_driver_error_is_logged_and_wrapped():
    store = MongoSurveyStore(FakeClient(PyMongoError("connection refused")), "survey")

    with capture_logs() as logs:
        with pytest.raises(StoreFailure) as exc:
            store.find(RecordKind.LAWYER, RecordQuery())

    assert exc.value.to_dict()["kind"] == "store_failure"
    assert "connection refused" in str(exc.value)
    assert logs[0]["event"] == "store.failure"
    assert logs[0]["operation"] == "find"
    assert logs[0]["log_level"] == "error"


def test_count_error_is_wrapped():
    store = MongoSurveyStore(FakeClient(PyMongoError("timed out")), "survey")

    with pytest.raises(StoreFailure):
        store.count(RecordKind.GENERAL, RecordQuery())
