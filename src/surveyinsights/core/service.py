"""Submission pipeline and administrative operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping

import pendulum
import structlog

from ..errors import (
    DuplicateSubmission,
    InvalidTransition,
    NotFound,
    StoreFailure,
    ValidationFailure,
)
from ..schemas import GeneralSurveyRecord, LawyerSurveyRecord
from ..store import RecordQuery, SurveyStore
from ..vocabulary import REVIEW_STATUS, RecordKind
from .metrics import DerivedMetricsCalculator
from .validation import RecordValidator, general_validator, lawyer_validator

_MODELS = {
    RecordKind.GENERAL: GeneralSurveyRecord,
    RecordKind.LAWYER: LawyerSurveyRecord,
}


@dataclass(slots=True, frozen=True)
class SubmissionReceipt:
    """Identifier and acceptance time of a persisted submission."""

    id: str
    submitted_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "submittedAt": self.submitted_at.isoformat()}


class SurveyService:
    """Validate, derive and persist submissions; apply admin updates."""

    def __init__(
        self,
        store: SurveyStore,
        *,
        calculator: DerivedMetricsCalculator | None = None,
        general: RecordValidator[GeneralSurveyRecord] | None = None,
        lawyer: RecordValidator[LawyerSurveyRecord] | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._calculator = calculator or DerivedMetricsCalculator()
        self._now_provider = now_provider or (lambda: pendulum.now("UTC"))
        self._general = general or general_validator(now_provider=self._now_provider)
        self._lawyer = lawyer or lawyer_validator(now_provider=self._now_provider)
        self._logger = structlog.get_logger(__name__)

    def submit_general(self, payload: Mapping[str, Any], *, ip_address: str | None = None) -> SubmissionReceipt:
        data = dict(payload)
        data["ipAddress"] = ip_address
        record = self._accept(RecordKind.GENERAL, self._general, data)
        now = self._now_provider()
        record = record.model_copy(update={"created_at": now, "updated_at": now})
        record_id = self._persist(RecordKind.GENERAL, record.to_document())
        self._logger.info("submission.accepted", kind=RecordKind.GENERAL.value, id=record_id)
        return SubmissionReceipt(id=record_id, submitted_at=record.submitted_at)

    def submit_lawyer(self, payload: Mapping[str, Any]) -> SubmissionReceipt:
        record = self._accept(RecordKind.LAWYER, self._lawyer, payload)

        if record.email:
            # Best effort only: concurrent submissions can both pass this check.
            # The Mongo store backs it with a unique index on email.
            existing = self._store.count(RecordKind.LAWYER, RecordQuery(equals={"email": record.email}))
            if existing:
                self._logger.info("submission.duplicate", kind=RecordKind.LAWYER.value, email=record.email)
                raise DuplicateSubmission(record.email)

        now = self._now_provider()
        record = self._calculator.apply(record.model_copy(update={"created_at": now, "updated_at": now}))
        record_id = self._persist(RecordKind.LAWYER, record.to_document())
        self._logger.info(
            "submission.accepted",
            kind=RecordKind.LAWYER.value,
            id=record_id,
            value_score=record.value_score,
            total_monthly_capacity=record.total_monthly_capacity,
        )
        return SubmissionReceipt(id=record_id, submitted_at=record.submitted_at)

    def get(self, kind: RecordKind, record_id: str) -> GeneralSurveyRecord | LawyerSurveyRecord:
        document = self._store.get(kind, record_id)
        if document is None:
            raise NotFound(kind.value, record_id)
        return _MODELS[kind].model_validate(document)

    def update_status(
        self,
        record_id: str,
        *,
        status: str | None = None,
        notes: Any = None,
    ) -> LawyerSurveyRecord:
        if status and status not in REVIEW_STATUS:
            self._logger.info("status.rejected", id=record_id, status=status)
            raise InvalidTransition(status, REVIEW_STATUS.values)

        current = self.get(RecordKind.LAWYER, record_id)
        changes: dict[str, Any] = {}
        if status:
            changes["status"] = status
        if notes:
            if isinstance(notes, Mapping) and isinstance(current.notes, Mapping):
                changes["notes"] = {**current.notes, **notes}
            else:
                changes["notes"] = notes
        if not changes:
            return current

        changes["updatedAt"] = self._now_provider()
        try:
            document = self._store.update(RecordKind.LAWYER, record_id, changes)
        except StoreFailure:
            self._logger.error("status.store_failure", id=record_id)
            raise
        if document is None:
            raise NotFound(RecordKind.LAWYER.value, record_id)
        self._logger.info("status.updated", id=record_id, status=document.get("status"))
        return LawyerSurveyRecord.model_validate(document)

    def delete(self, kind: RecordKind, record_id: str) -> None:
        if not self._store.delete(kind, record_id):
            raise NotFound(kind.value, record_id)
        self._logger.info("survey.deleted", kind=kind.value, id=record_id)

    def _accept(self, kind: RecordKind, validator: RecordValidator, payload: Mapping[str, Any]):
        try:
            return validator.validate(payload)
        except ValidationFailure as exc:
            self._logger.info(
                "submission.rejected",
                kind=kind.value,
                violations=[violation.to_dict() for violation in exc.violations],
            )
            raise

    def _persist(self, kind: RecordKind, document: dict[str, Any]) -> str:
        try:
            return self._store.insert(kind, document)
        except StoreFailure:
            self._logger.error("submission.store_failure", kind=kind.value)
            raise
