"""Outcome taxonomy surfaced by the survey engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Violation:
    """A single failed field rule."""

    field: str
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code, "message": self.message}


class SurveyError(Exception):
    """Base error carrying a stable machine-checkable ``kind``."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class ValidationFailure(SurveyError):
    """Raised when one or more field rules are violated."""

    kind = "validation_failure"

    def __init__(self, violations: list[Violation], message: str = "Submitted data is invalid"):
        super().__init__(message)
        self.violations = list(violations)

    @property
    def fields(self) -> list[str]:
        return [violation.field for violation in self.violations]

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["errors"] = [violation.to_dict() for violation in self.violations]
        return payload

    def __str__(self) -> str:  # pragma: no cover - trivial
        details = "; ".join(f"{v.field}: {v.message}" for v in self.violations)
        return f"{self.message}: {details}"


class DuplicateSubmission(SurveyError):
    """Raised when a lawyer survey reuses an email already on file."""

    kind = "duplicate_submission"

    def __init__(self, email: str):
        super().__init__("A survey from this email address has already been received")
        self.email = email


class NotFound(SurveyError):
    """Raised when a record id does not resolve."""

    kind = "not_found"

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"No {kind} survey with id {record_id!r}")
        self.record_kind = kind
        self.record_id = record_id


class InvalidTransition(SurveyError):
    """Raised when an administrative status is outside the lifecycle states."""

    kind = "invalid_transition"

    def __init__(self, status: object, allowed: tuple[str, ...]):
        super().__init__(f"Invalid status {status!r}; expected one of {', '.join(allowed)}")
        self.status = status
        self.allowed = allowed


class StoreFailure(SurveyError):
    """Raised when the persistence layer is unreachable or rejects an operation."""

    kind = "store_failure"


__all__ = [
    "Violation",
    "SurveyError",
    "ValidationFailure",
    "DuplicateSubmission",
    "NotFound",
    "InvalidTransition",
    "StoreFailure",
]
