from __future__ import annotations

import pytest

from conftest import FIXED_NOW, build_general_payload, build_lawyer_payload
from surveyinsights.core import SurveyService
from surveyinsights.errors import (
    DuplicateSubmission,
    InvalidTransition,
    NotFound,
    StoreFailure,
    ValidationFailure,
)
from surveyinsights.store import InMemorySurveyStore, RecordQuery
from surveyinsights.vocabulary import RecordKind


class FailingStore(InMemorySurveyStore):
    def insert(self, kind, document):
        raise StoreFailure("store unavailable")


def test_submit_lawyer_persists_derived_fields(service: SurveyService, store: InMemorySurveyStore):
    receipt = service.submit_lawyer(build_lawyer_payload(email="Lawyer@Firm.sa"))

    stored = store.get(RecordKind.LAWYER, receipt.id)
    assert stored is not None
    assert stored["total_monthly_capacity"] == 3
    assert stored["value_score"] == pytest.approx(13.5)
    assert stored["email"] == "lawyer@firm.sa"
    assert stored["createdAt"] == FIXED_NOW
    assert stored["updatedAt"] == FIXED_NOW
    assert receipt.submitted_at == FIXED_NOW
    assert receipt.to_dict()["id"] == receipt.id


def test_duplicate_email_is_rejected_without_persisting(service: SurveyService, store: InMemorySurveyStore):
    service.submit_lawyer(build_lawyer_payload(email="dup@firm.sa"))

    with pytest.raises(DuplicateSubmission):
        service.submit_lawyer(build_lawyer_payload(email="DUP@firm.sa "))

    assert store.count(RecordKind.LAWYER, RecordQuery()) == 1


def test_validation_runs_before_duplicate_check(service: SurveyService):
    service.submit_lawyer(build_lawyer_payload(email="dup@firm.sa"))

    with pytest.raises(ValidationFailure):
        service.submit_lawyer(build_lawyer_payload(email="dup@firm.sa", labor_cases=-3))


def test_records_without_email_never_conflict(service: SurveyService, store: InMemorySurveyStore):
    service.submit_lawyer(build_lawyer_payload())
    service.submit_lawyer(build_lawyer_payload())

    assert store.count(RecordKind.LAWYER, RecordQuery()) == 2


def test_invalid_submission_is_not_persisted(service: SurveyService, store: InMemorySurveyStore):
    with pytest.raises(ValidationFailure) as exc:
        service.submit_lawyer(build_lawyer_payload(specializations=[]))

    assert exc.value.fields == ["specializations"]
    assert store.count(RecordKind.LAWYER, RecordQuery()) == 0


def test_submit_general_captures_ip_address(service: SurveyService):
    receipt = service.submit_general(build_general_payload(), ip_address="10.0.0.7")

    record = service.get(RecordKind.GENERAL, receipt.id)
    assert record.ip_address == "10.0.0.7"
    assert record.submitted_at == FIXED_NOW


def test_update_status_and_merge_notes(service: SurveyService):
    receipt = service.submit_lawyer(build_lawyer_payload())

    first = service.update_status(receipt.id, status="contacted", notes={"call": "left voicemail"})
    second = service.update_status(receipt.id, notes={"email": "sent brochure"})

    assert first.status == "contacted"
    assert second.status == "contacted"
    assert second.notes == {"call": "left voicemail", "email": "sent brochure"}


def test_invalid_status_is_rejected_and_record_unchanged(service: SurveyService):
    receipt = service.submit_lawyer(build_lawyer_payload())

    with pytest.raises(InvalidTransition):
        service.update_status(receipt.id, status="archived")

    assert service.get(RecordKind.LAWYER, receipt.id).status == "pending"


def test_update_unknown_record_is_not_found(service: SurveyService):
    with pytest.raises(NotFound):
        service.update_status("missing", status="contacted")


def test_delete_removes_record(service: SurveyService):
    receipt = service.submit_general(build_general_payload())

    service.delete(RecordKind.GENERAL, receipt.id)

    with pytest.raises(NotFound):
        service.get(RecordKind.GENERAL, receipt.id)
    with pytest.raises(NotFound):
        service.delete(RecordKind.GENERAL, receipt.id)


def test_store_failure_propagates():
    service = SurveyService(FailingStore())

    with pytest.raises(StoreFailure):
        service.submit_general(build_general_payload())


def test_submitter_cannot_set_ip_address(service: SurveyService):
    receipt = service.submit_general(build_general_payload(ip_address="6.6.6.6", ipAddress="6.6.6.6"))

    record = service.get(RecordKind.GENERAL, receipt.id)
    assert record.ip_address is None


def test_submit_general_sets_timestamps(service: SurveyService):
    receipt = service.submit_general(build_general_payload(createdAt="2020-01-01T00:00:00Z"))

    record = service.get(RecordKind.GENERAL, receipt.id)
    assert record.created_at == FIXED_NOW
    assert record.updated_at == FIXED_NOW


def test_empty_status_leaves_status_unchanged(service: SurveyService):
    receipt = service.submit_lawyer(build_lawyer_payload())

    record = service.update_status(receipt.id, status="", notes={"call": "no answer"})

    assert record.status == "pending"
    assert record.notes == {"call": "no answer"}
