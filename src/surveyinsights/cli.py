"""Typer CLI entrypoint for survey submission, queries and export."""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

import typer
from pydantic import ValidationError

from .config import load_yaml
from .container import SurveyContainer, create_container
from .errors import (
    DuplicateSubmission,
    InvalidTransition,
    NotFound,
    StoreFailure,
    SurveyError,
    ValidationFailure,
)
from .export import write_lawyer_csv
from .logging import configure_logging
from .schemas import GeneralListParams, LawyerListParams, LawyerSearchParams
from .vocabulary import RecordKind

app = typer.Typer(help="Survey collection and analytics CLI.")

EXIT_CODES: dict[type[SurveyError], int] = {
    StoreFailure: 1,
    ValidationFailure: 3,
    DuplicateSubmission: 4,
    NotFound: 5,
    InvalidTransition: 6,
}


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


@contextmanager
def _outcomes() -> Iterator[None]:
    try:
        yield
    except SurveyError as exc:
        _echo_json(exc.to_dict())
        raise typer.Exit(code=EXIT_CODES.get(type(exc), 1)) from exc


def _container(ctx: typer.Context) -> SurveyContainer:
    return ctx.obj


@app.callback()
def main_options(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
    mongodb_uri: Optional[str] = typer.Option(None, envvar="MONGODB_URI", help="MongoDB connection URI."),
) -> None:
    """Load configuration and build the service container."""
    try:
        settings: dict[str, Any] = load_yaml(config) if config else {}
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc
    if mongodb_uri:
        store_settings = dict(settings.get("store") or {})
        store_settings.update({"backend": "mongo", "uri": mongodb_uri})
        settings["store"] = store_settings

    try:
        container = create_container(settings=settings)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc

    configure_logging(log_level or container.config.logging.level() or "INFO")
    ctx.obj = container
    ctx.call_on_close(container.shutdown_resources)


@app.command()
def submit(
    ctx: typer.Context,
    kind: RecordKind = typer.Option(..., help="Survey kind."),
    payload: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="JSON payload path."),
    ip_address: Optional[str] = typer.Option(None, help="Submitter IP address (general surveys)."),
) -> None:
    """Validate and persist one survey submission."""
    with payload.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"Invalid JSON: {exc}", param_name="payload") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter("Payload must be a JSON object", param_name="payload")

    service = _container(ctx).survey_service()
    with _outcomes():
        if kind is RecordKind.LAWYER:
            receipt = service.submit_lawyer(data)
        else:
            receipt = service.submit_general(data, ip_address=ip_address)
    _echo_json(receipt.to_dict())


@app.command("list")
def list_surveys(
    ctx: typer.Context,
    kind: RecordKind = typer.Option(..., help="Survey kind."),
    page: int = typer.Option(1, min=1),
    limit: Optional[int] = typer.Option(None, min=1, help="Page size (defaults from config)."),
    sort: Optional[str] = typer.Option(None, help="Sort spec, e.g. '-createdAt'."),
    status: Optional[str] = typer.Option(None),
    interest_level: Optional[str] = typer.Option(None),
    nationality: Optional[str] = typer.Option(None),
    language: Optional[str] = typer.Option(None),
) -> None:
    """List one page of surveys."""
    container = _container(ctx)
    engine = container.query_engine()
    with _outcomes():
        if kind is RecordKind.LAWYER:
            if nationality or language:
                raise typer.BadParameter("nationality/language filters apply to general surveys")
            params = LawyerListParams(
                page=page,
                limit=limit or container.config.query.lawyer_page_size(),
                sort=sort or "-createdAt",
                status=status,
                interest_level=interest_level,
            )
            result = engine.list_lawyer_surveys(params)
        else:
            if status or interest_level:
                raise typer.BadParameter("status/interest-level filters apply to lawyer surveys")
            general_params = GeneralListParams(
                page=page,
                limit=limit or container.config.query.general_page_size(),
                sort=sort or "-submittedAt",
                nationality=nationality,
                language=language,
            )
            result = engine.list_general_surveys(general_params)
    _echo_json(result.to_dict())


@app.command()
def search(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None),
    email: Optional[str] = typer.Option(None),
    mobile: Optional[str] = typer.Option(None),
    city: Optional[str] = typer.Option(None),
    min_compensation: Optional[float] = typer.Option(None),
    max_compensation: Optional[float] = typer.Option(None),
    min_capacity: Optional[int] = typer.Option(None),
) -> None:
    """Search lawyer surveys, best value first."""
    params = LawyerSearchParams(
        name=name,
        email=email,
        mobile=mobile,
        city=city,
        min_compensation=min_compensation,
        max_compensation=max_compensation,
        min_capacity=min_capacity,
    )
    with _outcomes():
        records = _container(ctx).query_engine().search_lawyer_surveys(params)
    _echo_json(
        {
            "count": len(records),
            "data": [record.model_dump(mode="json", by_alias=True) for record in records],
        }
    )


@app.command()
def analytics(
    ctx: typer.Context,
    kind: RecordKind = typer.Option(..., help="Survey kind."),
) -> None:
    """Print the analytics summary."""
    engine = _container(ctx).query_engine()
    with _outcomes():
        summary = engine.lawyer_analytics() if kind is RecordKind.LAWYER else engine.general_analytics()
    _echo_json(summary.to_dict())


@app.command()
def show(
    ctx: typer.Context,
    record_id: str = typer.Argument(...),
    kind: RecordKind = typer.Option(..., help="Survey kind."),
) -> None:
    """Print one survey."""
    with _outcomes():
        record = _container(ctx).survey_service().get(kind, record_id)
    _echo_json(record.model_dump(mode="json", by_alias=True))


@app.command("set-status")
def set_status(
    ctx: typer.Context,
    record_id: str = typer.Argument(...),
    status: Optional[str] = typer.Option(None, help="New lifecycle state."),
    notes: Optional[str] = typer.Option(None, help="Notes as JSON (objects are merged)."),
) -> None:
    """Update the administrative status and/or notes of a lawyer survey."""
    parsed_notes: Any = None
    if notes is not None:
        try:
            parsed_notes = json.loads(notes)
        except json.JSONDecodeError:
            parsed_notes = notes
    with _outcomes():
        record = _container(ctx).survey_service().update_status(record_id, status=status, notes=parsed_notes)
    _echo_json(record.model_dump(mode="json", by_alias=True))


@app.command()
def delete(
    ctx: typer.Context,
    record_id: str = typer.Argument(...),
    kind: RecordKind = typer.Option(..., help="Survey kind."),
) -> None:
    """Delete one survey."""
    with _outcomes():
        _container(ctx).survey_service().delete(kind, record_id)
    _echo_json({"deleted": record_id})


@app.command()
def export(
    ctx: typer.Context,
    output: Path = typer.Option(..., dir_okay=False, resolve_path=True, help="CSV output path."),
) -> None:
    """Export every lawyer survey to CSV."""
    with _outcomes():
        records = _container(ctx).query_engine().all_lawyer_surveys()
    count = write_lawyer_csv(output, records)
    typer.echo(f"Exported {count} surveys to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
