"""Field-level rule evaluation for submitted survey payloads."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar

import pendulum
from pydantic import BaseModel, ValidationError

from ..errors import ValidationFailure, Violation
from ..schemas import GeneralSurveyRecord, LawyerSurveyRecord
from ..vocabulary import (
    BIGGEST_CHALLENGE,
    CONSULTATION_PRICE,
    DISCOUNT_ACCEPTANCE,
    INTEREST_LEVEL,
    LEGAL_ISSUES_ANSWERS,
    MOST_IMPORTANT,
    PROFESSIONAL_STATUS,
    YEARS_EXPERIENCE,
    RecordKind,
    Vocabulary,
)

RecordT = TypeVar("RecordT", bound=BaseModel)

MISSING_REQUIRED = "missing_required"
INVALID_ENUM = "invalid_enum"
INVALID_TYPE = "invalid_type"
OUT_OF_RANGE = "out_of_range"
EMPTY_COLLECTION = "empty_collection"
INVALID_FORMAT = "invalid_format"

# Keys a submitter may never set; they are owned by the store, the
# administrative workflow or the derived-metrics calculator.
PROTECTED_KEYS = frozenset(
    {
        "id",
        "_id",
        "__v",
        "status",
        "notes",
        "createdAt",
        "updatedAt",
        "total_monthly_capacity",
        "value_score",
    }
)


class RuleViolation(Exception):
    """Internal signal raised by a rule; converted into a ``Violation``."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class Enumeration:
    """Value must be a member of a fixed vocabulary."""

    def __init__(self, vocabulary: Vocabulary):
        self.vocabulary = vocabulary

    def __call__(self, value: Any) -> Any:
        if not isinstance(value, str) or value not in self.vocabulary:
            raise RuleViolation(INVALID_ENUM, f"{value!r} is not an allowed {self.vocabulary.name} value")
        return value


class NumericRange:
    """Value must parse as a number within the configured bounds."""

    def __init__(
        self,
        *,
        minimum: float | None = None,
        maximum: float | None = None,
        exclusive_minimum: bool = False,
        integer: bool = False,
    ):
        self.minimum = minimum
        self.maximum = maximum
        self.exclusive_minimum = exclusive_minimum
        self.integer = integer

    def __call__(self, value: Any) -> int | float:
        number = self._parse(value)
        if self.integer:
            if not float(number).is_integer():
                raise RuleViolation(INVALID_TYPE, "must be a whole number")
            number = int(number)
        if self.minimum is not None:
            too_low = number <= self.minimum if self.exclusive_minimum else number < self.minimum
            if too_low:
                relation = "greater than" if self.exclusive_minimum else "at least"
                raise RuleViolation(OUT_OF_RANGE, f"must be {relation} {self.minimum:g}")
        if self.maximum is not None and number > self.maximum:
            raise RuleViolation(OUT_OF_RANGE, f"must be at most {self.maximum:g}")
        return number

    @staticmethod
    def _parse(value: Any) -> int | float:
        if isinstance(value, bool):
            raise RuleViolation(INVALID_TYPE, "must be a number")
        if isinstance(value, (int, float)):
            number: int | float = value
        elif isinstance(value, str):
            text = value.strip()
            try:
                number = int(text)
            except ValueError:
                try:
                    number = float(text)
                except ValueError as exc:
                    raise RuleViolation(INVALID_TYPE, "must be a number") from exc
        else:
            raise RuleViolation(INVALID_TYPE, "must be a number")
        if isinstance(number, float) and not math.isfinite(number):
            raise RuleViolation(INVALID_TYPE, "must be a finite number")
        return number


class NonEmptyCollection:
    """Array-valued field with at least one element."""

    def __call__(self, value: Any) -> list[Any]:
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise RuleViolation(INVALID_TYPE, "must be a list")
        if not value:
            raise RuleViolation(EMPTY_COLLECTION, "must contain at least one item")
        return list(value)


class Pattern:
    """String value must match a format expression."""

    def __init__(self, expression: str, label: str):
        self.regex = re.compile(expression)
        self.label = label

    def __call__(self, value: Any) -> str:
        if not isinstance(value, str) or not self.regex.fullmatch(value):
            raise RuleViolation(INVALID_FORMAT, f"is not a valid {self.label}")
        return value


Rule = Callable[[Any], Any]


def number_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def strip_text(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def lower_text(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


@dataclass(frozen=True)
class FieldSpec:
    """Declared rules for one payload field.

    Optional fields are only checked when a non-blank value is present.
    """

    name: str
    required: bool = False
    rules: tuple[Rule, ...] = ()
    normalizers: tuple[Callable[[Any], Any], ...] = field(default=())


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class RecordValidator(Generic[RecordT]):
    """Apply a field rule set and materialise the accepted record."""

    def __init__(
        self,
        kind: RecordKind,
        fields: Sequence[FieldSpec],
        model: type[RecordT],
        *,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self.kind = kind
        self._fields = list(fields)
        self._model = model
        self._now_provider = now_provider or (lambda: pendulum.now("UTC"))
        # Attribute names of aliased fields are not part of the payload
        # vocabulary; only the stored camelCase keys are.
        self._shadowed = frozenset(
            name for name, info in model.model_fields.items() if info.alias and info.alias != name
        )

    @property
    def field_names(self) -> list[str]:
        return [spec.name for spec in self._fields]

    def check(self, payload: Mapping[str, Any]) -> tuple[dict[str, Any], list[Violation]]:
        """Return the cleaned payload and every violation found."""
        data = {
            key: value
            for key, value in payload.items()
            if key not in PROTECTED_KEYS and key not in self._shadowed
        }
        violations: list[Violation] = []

        for spec in self._fields:
            value = data.get(spec.name)
            for normalize in spec.normalizers:
                value = normalize(value)

            if _is_blank(value):
                if spec.required:
                    violations.append(Violation(spec.name, MISSING_REQUIRED, f"{spec.name} is required"))
                data.pop(spec.name, None)
                continue

            try:
                for rule in spec.rules:
                    value = rule(value)
            except RuleViolation as exc:
                violations.append(Violation(spec.name, exc.code, f"{spec.name} {exc.message}"))
                continue
            data[spec.name] = value

        return data, violations

    def validate(self, payload: Mapping[str, Any]) -> RecordT:
        """Return the accepted record or raise ``ValidationFailure``."""
        data, violations = self.check(payload)
        if violations:
            raise ValidationFailure(violations)

        data["submittedAt"] = self._resolve_submitted_at(payload.get("submittedAt"))
        try:
            return self._model.model_validate(data)
        except ValidationError as exc:
            raise ValidationFailure(_violations_from_pydantic(exc)) from exc

    def _resolve_submitted_at(self, raw: Any) -> datetime:
        if isinstance(raw, datetime):
            return raw
        if isinstance(raw, (int, float)) and not isinstance(raw, bool) and math.isfinite(raw):
            # Numeric timestamps are epoch milliseconds.
            try:
                return pendulum.from_timestamp(raw / 1000)
            except (OverflowError, OSError, ValueError):
                return self._now_provider()
        if isinstance(raw, str) and raw.strip():
            try:
                parsed = pendulum.parse(raw.strip())
            except ValueError:
                return self._now_provider()
            if isinstance(parsed, datetime):
                return parsed
        return self._now_provider()


def _violations_from_pydantic(exc: ValidationError) -> list[Violation]:
    violations = []
    for error in exc.errors():
        loc = error.get("loc") or ("payload",)
        name = str(loc[0])
        violations.append(Violation(name, INVALID_TYPE, f"{name} {error.get('msg', 'is invalid')}"))
    return violations


GENERAL_EMAIL = r"[\w\-.]+@([\w-]+\.)+[\w-]{2,4}"
LAWYER_EMAIL = r"[^\s@]+@[^\s@]+\.[^\s@]+"
LOCAL_MOBILE = r"(05|5)[0-9]{8}"

GENERAL_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("surveySource", required=True),
    FieldSpec("surveySourceOther"),
    FieldSpec("nationality", required=True),
    FieldSpec("residenceYears", required=True),
    FieldSpec("age", required=True),
    FieldSpec("income", required=True),
    FieldSpec("legalIssues", required=True, rules=(Enumeration(LEGAL_ISSUES_ANSWERS.as_vocabulary()),)),
    FieldSpec("mainBarrier", required=True),
    FieldSpec("quickDecision", required=True),
    FieldSpec("giveawayInterest", required=True),
    FieldSpec("email", rules=(Pattern(GENERAL_EMAIL, "email address"),), normalizers=(strip_text,)),
    FieldSpec("phone"),
    FieldSpec("legalTechServices"),
    FieldSpec("legalTechServiceName"),
    FieldSpec("legalTechConsideration"),
    FieldSpec("language"),
    FieldSpec("ipAddress"),
)

_COUNT = NumericRange(minimum=0, integer=True)

LAWYER_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("professional_status", required=True, rules=(Enumeration(PROFESSIONAL_STATUS),)),
    FieldSpec("years_experience", required=True, rules=(Enumeration(YEARS_EXPERIENCE),)),
    FieldSpec("specializations", required=True, rules=(NonEmptyCollection(),)),
    FieldSpec("specializations_other"),
    FieldSpec("languages", required=True, rules=(NonEmptyCollection(),)),
    FieldSpec("languages_other"),
    FieldSpec("written_consultations", required=True, rules=(_COUNT,)),
    FieldSpec("labor_cases", required=True, rules=(_COUNT,)),
    FieldSpec("family_cases", required=True, rules=(_COUNT,)),
    FieldSpec("monthly_compensation", required=True, rules=(NumericRange(minimum=0, exclusive_minimum=True),)),
    FieldSpec("discount_acceptance", required=True, rules=(Enumeration(DISCOUNT_ACCEPTANCE),)),
    FieldSpec("current_consultation_price", required=True, rules=(Enumeration(CONSULTATION_PRICE),)),
    FieldSpec("most_important", required=True, rules=(Enumeration(MOST_IMPORTANT),)),
    FieldSpec("most_important_other"),
    FieldSpec("biggest_challenge", rules=(Enumeration(BIGGEST_CHALLENGE),)),
    FieldSpec("biggest_challenge_other"),
    FieldSpec("interest_level", required=True, rules=(Enumeration(INTEREST_LEVEL),)),
    FieldSpec("questions_concerns"),
    FieldSpec("name", normalizers=(number_text, strip_text)),
    FieldSpec("mobile", rules=(Pattern(LOCAL_MOBILE, "mobile number"),), normalizers=(number_text, strip_text)),
    FieldSpec("email", rules=(Pattern(LAWYER_EMAIL, "email address"),), normalizers=(strip_text, lower_text)),
    FieldSpec("city", normalizers=(number_text, strip_text)),
)


def general_validator(**kwargs: Any) -> RecordValidator[GeneralSurveyRecord]:
    return RecordValidator(RecordKind.GENERAL, GENERAL_FIELDS, GeneralSurveyRecord, **kwargs)


def lawyer_validator(**kwargs: Any) -> RecordValidator[LawyerSurveyRecord]:
    return RecordValidator(RecordKind.LAWYER, LAWYER_FIELDS, LawyerSurveyRecord, **kwargs)
