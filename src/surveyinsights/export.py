"""Spreadsheet-friendly CSV rendering of lawyer surveys."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from .schemas import LawyerSurveyRecord

BOM = "\ufeff"
LIST_SEPARATOR = "; "


def _joined(values: list[str] | None) -> str:
    return LIST_SEPARATOR.join(values or [])


def _date(value: datetime | None) -> str:
    return value.date().isoformat() if value else ""


def _text(value: Any) -> str:
    return "" if value is None else str(value)


LAWYER_COLUMNS: tuple[tuple[str, Callable[[LawyerSurveyRecord], str]], ...] = (
    ("ID", lambda r: _text(r.id)),
    ("التاريخ", lambda r: _date(r.created_at or r.submitted_at)),
    ("الوضع المهني", lambda r: r.professional_status),
    ("سنوات الخبرة", lambda r: r.years_experience),
    ("التخصصات", lambda r: _joined(r.specializations)),
    ("اللغات", lambda r: _joined(r.languages)),
    ("الاستشارات الكتابية", lambda r: _text(r.written_consultations)),
    ("القضايا العمالية", lambda r: _text(r.labor_cases)),
    ("القضايا الأسرية", lambda r: _text(r.family_cases)),
    ("المقابل الشهري", lambda r: _text(r.monthly_compensation)),
    ("الخصم المقبول", lambda r: r.discount_acceptance),
    ("السعر الحالي", lambda r: r.current_consultation_price),
    ("الأهم", lambda r: r.most_important),
    ("التحدي الأكبر", lambda r: _text(r.biggest_challenge)),
    ("مستوى الاهتمام", lambda r: r.interest_level),
    ("الاسم", lambda r: _text(r.name)),
    ("الجوال", lambda r: _text(r.mobile)),
    ("البريد الإلكتروني", lambda r: _text(r.email)),
    ("المدينة", lambda r: _text(r.city)),
    ("الحالة", lambda r: r.status),
)


def render_lawyer_csv(records: Iterable[LawyerSurveyRecord]) -> str:
    """Render records as BOM-prefixed CSV with every cell quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([title for title, _ in LAWYER_COLUMNS])
    for record in records:
        writer.writerow([extract(record) for _, extract in LAWYER_COLUMNS])
    return BOM + buffer.getvalue()


def write_lawyer_csv(path: Path, records: Iterable[LawyerSurveyRecord]) -> int:
    """Write the CSV export to ``path`` and return the number of rows."""
    rows = list(records)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_lawyer_csv(rows), encoding="utf-8")
    return len(rows)
