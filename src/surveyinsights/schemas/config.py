"""Pydantic configuration schema for YAML input."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError


class StoreConfig(BaseModel):
    backend: Literal["memory", "mongo"] = "memory"
    uri: str | None = None
    database: str = "survey"


class QueryConfig(BaseModel):
    lawyer_page_size: int = Field(default=20, ge=1)
    general_page_size: int = Field(default=50, ge=1)
    search_limit: int = Field(default=50, ge=1)
    top_value_limit: int = Field(default=10, ge=1)


class MetricsConfig(BaseModel):
    discount_multipliers: dict[str, float] | None = None
    fallback_multiplier: float | None = None
    compensation_divisor: float | None = Field(default=None, gt=0)


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {
            "store": self.store.model_dump(),
            "query": self.query.model_dump(),
            "logging": self.logging.model_dump(),
        }
        metrics = self.metrics.model_dump(exclude_none=True)
        if metrics:
            settings["metrics"] = metrics
        return settings


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
