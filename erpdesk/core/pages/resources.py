"""Declarative description of one collection exposed by the ERP API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Set, Tuple, Type

from pydantic import BaseModel

from erpdesk.core.auth.roles import Role

DEFAULT_COLUMN_WIDTH = 15


@dataclass(frozen=True)
class Column:
    """Table and spreadsheet column; ``key`` may be a dotted path."""

    key: str
    label: str
    width: Optional[int] = None


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    kind: str = "text"
    required: bool = False
    choices: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Choice:
    """Select-box filter; remote ones become query params, the rest filter locally."""

    param: str
    label: str
    options: Tuple[str, ...]
    field: Optional[str] = None
    remote: bool = False

    @property
    def record_field(self) -> str:
        return self.field or self.param


@dataclass(frozen=True)
class Resource:
    name: str
    title: str
    endpoint: str
    collection_key: str
    columns: Tuple[Column, ...]
    item_key: Optional[str] = None
    record_endpoint: Optional[str] = None
    id_field: str = "_id"
    search_fields: Tuple[str, ...] = ()
    filters: Tuple[Choice, ...] = ()
    remote_filters: Tuple[str, ...] = ()
    fixed_params: Mapping[str, Any] = field(default_factory=dict)
    paginated: bool = True
    deletable: bool = False
    date_field: Optional[str] = None
    update_method: str = "PATCH"
    view_role: Optional[Role] = None
    mutate_role: Optional[Role] = None
    delete_role: Optional[Role] = None
    form_schema: Optional[Type[BaseModel]] = None
    form_fields: Tuple[FormField, ...] = ()
    transform: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None
    export_name: Optional[str] = None

    @property
    def editable(self) -> bool:
        return self.form_schema is not None

    @property
    def deleter_role(self) -> Optional[Role]:
        return self.delete_role or self.mutate_role

    @property
    def export_basename(self) -> str:
        return self.export_name or self.name

    def record_id(self, record: Mapping[str, Any]) -> str:
        value = record.get(self.id_field)
        if value is None:
            value = record.get("id")
        return "" if value is None else str(value)

    def record_url(self, record_id: str, action: Optional[str] = None) -> str:
        base = self.record_endpoint or self.endpoint
        path = f"{base.rstrip('/')}/{record_id}"
        return f"{path}/{action}" if action else path


class ResourceRegistry:
    """Guards against two screens claiming the same resource name."""

    def __init__(self) -> None:
        self._names: Set[str] = set()

    def register(self, resource: Resource) -> Resource:
        if resource.name in self._names:
            raise ValueError(f"Resource already registered: {resource.name}")
        self._names.add(resource.name)
        return resource


registry = ResourceRegistry()
