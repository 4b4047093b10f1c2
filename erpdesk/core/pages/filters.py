"""Client-side search and equality filtering over the current page of records.

Only the most recently fetched page is filtered; the remote collection is
never searched from here, so displayed counts can be lower than the total
reported by the API.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

ALL = "ALL"


def resolve_path(record: Any, path: str) -> Any:
    """Read ``a.b.c`` from nested dicts; missing links resolve to ``None``."""
    value = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
        if value is None:
            return None
    return value


def clean_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop blank values and the ``ALL`` sentinel."""
    cleaned: Dict[str, str] = {}
    for key, value in (filters or {}).items():
        if value is None:
            continue
        text = str(value).strip()
        if not text or text.upper() == ALL:
            continue
        cleaned[key] = text
    return cleaned


def matches_search(record: Mapping[str, Any], term: str, fields: Sequence[str]) -> bool:
    needle = (term or "").strip().lower()
    if not needle:
        return True
    for field in fields:
        value = resolve_path(record, field)
        if value is not None and needle in str(value).lower():
            return True
    return False


def matches_filters(record: Mapping[str, Any], filters: Mapping[str, str]) -> bool:
    for field, expected in filters.items():
        value = resolve_path(record, field)
        if value is None or str(value) != expected:
            return False
    return True


def filter_records(
    records: Iterable[Mapping[str, Any]],
    search: str = "",
    search_fields: Sequence[str] = (),
    filters: Optional[Mapping[str, Any]] = None,
) -> List[Mapping[str, Any]]:
    active = clean_filters(filters)
    return [
        record
        for record in records
        if matches_search(record, search, search_fields) and matches_filters(record, active)
    ]
