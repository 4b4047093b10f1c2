"""Spreadsheet export for list screens."""

from __future__ import annotations

from datetime import date, datetime, time
from io import BytesIO
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from erpdesk.core.pages.filters import resolve_path
from erpdesk.core.pages.resources import DEFAULT_COLUMN_WIDTH, Column

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, str) and "T" in value:
        parsed = _parse_datetime(value)
        if parsed is not None:
            return parsed.date().isoformat()
    if isinstance(value, (list, tuple)):
        return ", ".join(str(format_cell(v)) for v in value)
    if isinstance(value, dict):
        return value.get("name") or value.get("code") or ""
    return value


def to_rows(records: Iterable[Mapping[str, Any]], columns: Sequence[Column]) -> List[dict]:
    return [{col.label: format_cell(resolve_path(record, col.key)) for col in columns} for record in records]


def build_workbook(
    records: Iterable[Mapping[str, Any]],
    columns: Sequence[Column],
    sheet_name: str = "Sheet1",
) -> bytes:
    df = pd.DataFrame(to_rows(records, columns), columns=[col.label for col in columns])
    bio = BytesIO()
    with pd.ExcelWriter(bio, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        ws = writer.sheets[sheet_name]
        for i, col in enumerate(columns, start=1):
            ws.column_dimensions[get_column_letter(i)].width = col.width or DEFAULT_COLUMN_WIDTH
    bio.seek(0)
    return bio.read()


def export_filename(base: str, now: Optional[datetime] = None) -> str:
    """``items_2024-05-01T09-30-00.xlsx``"""
    stamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"{base}_{stamp}.xlsx"


def filter_by_date_range(
    records: Iterable[Mapping[str, Any]],
    field: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> List[Mapping[str, Any]]:
    """Inclusive range filter; ``end`` covers its whole day, unparseable dates are kept."""
    records = list(records)
    if not start and not end:
        return records
    start_at = _naive(_parse_datetime(start)) if start else None
    end_at = _parse_datetime(end) if end else None
    if end_at is not None:
        end_at = _naive(datetime.combine(end_at.date(), time.max))

    kept = []
    for record in records:
        when = _naive(_parse_datetime(resolve_path(record, field)))
        if when is None:
            kept.append(record)
            continue
        if start_at is not None and when < start_at:
            continue
        if end_at is not None and when > end_at:
            continue
        kept.append(record)
    return kept


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.replace(tzinfo=None)
