"""Derived metrics computed for accepted lawyer surveys."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..schemas import LawyerSurveyRecord
from ..vocabulary import DISCOUNT_10_15, DISCOUNT_20_25, DISCOUNT_30_35, DISCOUNT_NONE


def _default_multipliers() -> dict[str, float]:
    return {
        DISCOUNT_10_15: 0.9,
        DISCOUNT_20_25: 0.8,
        DISCOUNT_30_35: 0.7,
        DISCOUNT_NONE: 1.0,
    }


@dataclass
class ValueScoreConfig:
    """Weights used by the value score formula."""

    discount_multipliers: dict[str, float] = field(default_factory=_default_multipliers)
    # Only reachable for stored records whose discount tier bypassed validation.
    fallback_multiplier: float = 0.85
    compensation_divisor: float = 1000.0


@dataclass(slots=True, frozen=True)
class DerivedMetrics:
    total_monthly_capacity: int
    value_score: float


class DerivedMetricsCalculator:
    """Pure, idempotent derivation of capacity and value score."""

    def __init__(self, *, config: ValueScoreConfig | None = None) -> None:
        self._config = config or ValueScoreConfig()

    def multiplier(self, discount_acceptance: str | None) -> float:
        return self._config.discount_multipliers.get(
            discount_acceptance or "", self._config.fallback_multiplier
        )

    def compute(self, record: LawyerSurveyRecord) -> DerivedMetrics:
        capacity = record.written_consultations + record.labor_cases + record.family_cases
        value_score = (
            capacity
            * (record.monthly_compensation / self._config.compensation_divisor)
            * self.multiplier(record.discount_acceptance)
        )
        return DerivedMetrics(total_monthly_capacity=capacity, value_score=value_score)

    def apply(self, record: LawyerSurveyRecord) -> LawyerSurveyRecord:
        """Return a copy of ``record`` with derived fields recomputed."""
        metrics = self.compute(record)
        return record.model_copy(
            update={
                "total_monthly_capacity": metrics.total_monthly_capacity,
                "value_score": metrics.value_score,
            }
        )
