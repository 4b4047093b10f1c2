"""Form validation helpers shared by the CRUD screens."""

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

M = TypeVar("M", bound=BaseModel)

FORM_ERROR_KEY = "__all__"
MAX_LINES = 50


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _without_blanks(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if not _is_blank(v)}


class ApiForm(BaseModel):
    """Base for HTML forms whose fields map 1:1 onto API payload keys.

    Input names use the API's camelCase aliases; blank inputs count as unset,
    so field defaults apply. Forms with repeated rows set ``line_prefix`` and
    receive them as a list.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)

    line_prefix: ClassVar[Optional[str]] = None

    @model_validator(mode="before")
    @classmethod
    def drop_blanks(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        prefix = cls.line_prefix
        cleaned = _without_blanks({k: v for k, v in data.items() if not (prefix and k.startswith(f"{prefix}-"))})
        if prefix and prefix not in data:
            cleaned[prefix] = [_without_blanks(row) for row in parse_lines(data, prefix)]
        return cleaned

    def api_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def form_errors(exc: ValidationError, prefix: Optional[str] = None, positions: Sequence[int] = ()) -> Dict[str, str]:
    """Flatten pydantic errors to ``{input_name: message}``; row errors use ``items-0-field``.

    ``positions`` maps a validated row back to the index of the inputs it was
    read from, since blank rows are dropped before validation.
    """
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = list(err.get("loc") or ())
        if prefix and len(loc) > 1 and loc[0] == prefix and isinstance(loc[1], int) and loc[1] < len(positions):
            loc[1] = positions[loc[1]]
        key = "-".join(str(part) for part in loc) if loc else FORM_ERROR_KEY
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(key, message)
    return errors


def validate_form(schema: Type[M], data: Mapping[str, Any]) -> Tuple[Optional[M], Dict[str, str]]:
    if hasattr(data, "to_dict"):
        data = data.to_dict()
    try:
        return schema.model_validate(dict(data)), {}
    except ValidationError as exc:
        prefix = getattr(schema, "line_prefix", None)
        positions = [index for index, _ in _indexed_lines(data, prefix)] if prefix else []
        return None, form_errors(exc, prefix, positions)


def _indexed_lines(data: Mapping[str, Any], prefix: str) -> List[Tuple[int, Dict[str, Any]]]:
    rows: Dict[int, Dict[str, Any]] = {}
    marker = f"{prefix}-"
    for key, value in data.items():
        if not key.startswith(marker):
            continue
        index, _, name = key[len(marker):].partition("-")
        if not index.isdigit() or not name:
            continue
        rows.setdefault(int(index), {})[name] = value
    return [(index, row) for index, row in sorted(rows.items()) if not all(_is_blank(v) for v in row.values())]


def parse_lines(data: Mapping[str, Any], prefix: str = "items") -> List[Dict[str, Any]]:
    """Collect ``items-0-name``/``items-1-name`` style inputs into ordered rows.

    Rows whose inputs are all blank are dropped. A filled row at or beyond
    ``MAX_LINES`` raises ``ValueError``.
    """
    lines = _indexed_lines(data, prefix)
    if lines and lines[-1][0] >= MAX_LINES:
        raise ValueError(f"at most {MAX_LINES} item rows are allowed")
    return [row for _, row in lines]


def flatten_lines(rows: List[Mapping[str, Any]], prefix: str = "items") -> Dict[str, Any]:
    """Inverse of :func:`parse_lines`, used to pre-fill an edit form."""
    return {f"{prefix}-{i}-{name}": value for i, row in enumerate(rows) for name, value in row.items()}


def line_rows(values: Mapping[str, Any], prefix: str = "items", minimum: int = 3) -> int:
    """Number of row inputs to render: every filled row plus one blank, never more than ``MAX_LINES``."""
    indexes = [
        int(key[len(prefix) + 1:].partition("-")[0])
        for key in values
        if key.startswith(f"{prefix}-") and key[len(prefix) + 1:].partition("-")[0].isdigit()
    ]
    return min(max(max(indexes, default=-1) + 2, minimum), MAX_LINES)
