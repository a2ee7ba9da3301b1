"""Dependency injection container for the survey engine."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .core import DerivedMetricsCalculator, QueryEngine, SurveyService, ValueScoreConfig
from .schemas.config import load_config
from .store import InMemorySurveyStore
from .store.mongo import mongo_store_resource


class SurveyContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    store = providers.Selector(
        config.store.backend,
        memory=providers.Singleton(InMemorySurveyStore),
        mongo=providers.Resource(
            mongo_store_resource,
            uri=config.store.uri,
            database=config.store.database,
        ),
    )

    metrics_calculator = providers.Singleton(DerivedMetricsCalculator)

    survey_service = providers.Singleton(
        SurveyService,
        store=store,
        calculator=metrics_calculator,
    )

    query_engine = providers.Singleton(
        QueryEngine,
        store=store,
        search_limit=config.query.search_limit,
        top_value_limit=config.query.top_value_limit,
    )


def create_container(*, settings: dict[str, Any] | None = None) -> SurveyContainer:
    """Instantiate container with defaults plus optional overrides."""

    container = SurveyContainer()
    app_config = load_config(settings or {})
    container.config.from_dict(app_config.to_settings())

    metrics_settings = app_config.metrics.model_dump(exclude_none=True)
    if metrics_settings:
        if "discount_multipliers" in metrics_settings:
            metrics_settings["discount_multipliers"] = {
                **ValueScoreConfig().discount_multipliers,
                **metrics_settings["discount_multipliers"],
            }
        value_config = ValueScoreConfig(**metrics_settings)
        container.metrics_calculator.override(
            providers.Singleton(DerivedMetricsCalculator, config=value_config)
        )

    return container
