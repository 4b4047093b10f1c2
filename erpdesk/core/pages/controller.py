"""Generic page controller: one ERP collection bridged to one table screen.

A controller holds the UI state of a list screen (records, pagination totals,
loading flag, last error) and issues every call through the auth client. Each
list fetch is tagged with a generation number; a response is applied only if
no newer fetch was started in the meantime, so a slow answer for an old
filter combination can never overwrite a newer one.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from erpdesk.core.api.result import Result
from erpdesk.core.auth.auth_client import AuthClient
from erpdesk.core.pages.filters import clean_filters, filter_records
from erpdesk.core.pages.resources import Resource
from erpdesk.core.pages.snapshots import Snapshot, StaleSnapshotStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
DATE_FROM = "startDate"
DATE_TO = "endDate"


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class ListQuery:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search: str = ""
    filters: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_args(cls, args: Mapping[str, Any], resource: Resource, limit: int = DEFAULT_PAGE_SIZE) -> "ListQuery":
        names = [choice.param for choice in resource.filters] + list(resource.remote_filters)
        if resource.date_field:
            names += [DATE_FROM, DATE_TO]
        return cls(
            page=max(_to_int(args.get("page"), 1), 1),
            limit=limit,
            search=(args.get("search") or "").strip(),
            filters=clean_filters({name: args.get(name) for name in names}),
        )

    def params(self, resource: Resource) -> Dict[str, Any]:
        """Query params for the list endpoint; local-only filters stay out."""
        remote = set(resource.remote_filters) | {c.param for c in resource.filters if c.remote}
        params: Dict[str, Any] = dict(resource.fixed_params)
        if resource.paginated:
            params["page"] = self.page
            params["limit"] = self.limit
        if self.search:
            params["search"] = self.search
        params.update({k: v for k, v in self.filters.items() if k in remote})
        return params

    def args(self) -> Dict[str, Any]:
        """Round-trip form of the query, used to build pager and export links."""
        out: Dict[str, Any] = dict(self.filters)
        if self.search:
            out["search"] = self.search
        return out


@dataclass(frozen=True)
class Notification:
    level: str
    message: str

    @property
    def ok(self) -> bool:
        return self.level == "success"

    @classmethod
    def success(cls, message: str) -> "Notification":
        return cls("success", message)

    @classmethod
    def error(cls, message: str) -> "Notification":
        return cls("error", message)

    @classmethod
    def info(cls, message: str) -> "Notification":
        return cls("info", message)


class PageController:
    def __init__(
        self,
        client: AuthClient,
        resource: Resource,
        snapshots: Optional[StaleSnapshotStore] = None,
        session_id: Optional[str] = None,
    ):
        self.client = client
        self.resource = resource
        self.snapshots = snapshots
        self.session_id = session_id

        self.records: List[Dict[str, Any]] = []
        self.total_count = 0
        self.total_pages = 1
        self.page = 1
        self.loading = False
        self.error: Optional[str] = None
        self.generation = 0
        self.last_result: Optional[Result] = None
        self.last_query = ListQuery()

        self._issued = 0
        self._lock = threading.Lock()
        self._restore_snapshot()

    # --- list state ---

    def begin_fetch(self) -> int:
        with self._lock:
            self._issued += 1
            self.loading = True
            return self._issued

    def complete_fetch(self, generation: int, result: Result[Dict[str, Any]], page: int = 1) -> bool:
        """Apply a list response; returns False when it was superseded."""
        with self._lock:
            if generation != self._issued:
                logger.debug(
                    "Dropping stale %s response (generation %s, latest %s)",
                    self.resource.name,
                    generation,
                    self._issued,
                )
                return False
            self.loading = False
            self.generation = generation
            self.last_result = result
            if not result.ok:
                # Previously displayed rows stay visible next to the error.
                self.error = result.message
                return True
            self.records, self.total_count, self.total_pages, self.page = self._parse_page(result.value or {}, page)
            self.error = None
        self._save_snapshot()
        return True

    def load(self, query: Optional[ListQuery] = None) -> Result[Dict[str, Any]]:
        """Issue exactly one list fetch for ``query``."""
        query = query or self.last_query
        self.last_query = query
        generation = self.begin_fetch()
        result = self.client.request_json(self.resource.endpoint, params=query.params(self.resource))
        if not result.ok:
            logger.warning("Loading %s failed: %s", self.resource.name, result.message)
        self.complete_fetch(generation, result, page=query.page)
        return result

    def visible_records(self, search: str = "", filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Search and filter the current page only."""
        chosen = filters or {}
        local = {c.record_field: chosen.get(c.param) for c in self.resource.filters if not c.remote}
        return filter_records(self.records, search, self.resource.search_fields, local)  # type: ignore[return-value]

    def find(self, record_id: str) -> Optional[Dict[str, Any]]:
        for record in self.records:
            if self.resource.record_id(record) == record_id:
                return record
        return None

    def fetch_record(self, record_id: str) -> Result[Dict[str, Any]]:
        result = self.client.request_json(self.resource.record_url(record_id))
        if not result.ok:
            return result
        body = result.value or {}
        data = body.get("data", body)
        if isinstance(data, dict) and self.resource.item_key and isinstance(data.get(self.resource.item_key), dict):
            data = data[self.resource.item_key]
        if not isinstance(data, dict):
            data = {}
        return Result.success(self._prepare(data), result.status_code)

    # --- mutations ---

    def save(self, payload: Dict[str, Any], record_id: Optional[str] = None) -> Notification:
        """Create (POST) or update the record, then re-fetch the list on success."""
        if record_id:
            method, path, verb = self.resource.update_method, self.resource.record_url(record_id), "updated"
        else:
            method, path, verb = "POST", self.resource.endpoint, "created"
        result = self.client.request_json(path, method=method, json=payload)
        self.last_result = result
        if not result.ok:
            logger.info("Saving %s failed: %s", self.resource.name, result.message)
            return Notification.error(result.message)
        self.load()
        return Notification.success(f"{self.resource.title} {verb}.")

    def delete(self, record_id: str, confirmed: bool = False) -> Notification:
        if not confirmed:
            return Notification.info("Delete cancelled.")
        result = self.client.request_json(self.resource.record_url(record_id), method="DELETE")
        self.last_result = result
        if not result.ok:
            logger.info("Deleting %s %s failed: %s", self.resource.name, record_id, result.message)
            return Notification.error(result.message)
        with self._lock:
            before = len(self.records)
            self.records = [r for r in self.records if self.resource.record_id(r) != record_id]
            self.total_count = max(self.total_count - (before - len(self.records)), 0)
        self._save_snapshot()
        return Notification.success(f"{self.resource.title} deleted.")

    def perform(
        self,
        record_id: str,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
        method: str = "PATCH",
        success_message: Optional[str] = None,
    ) -> Notification:
        """Run a workflow transition such as ``approve`` and re-fetch on success."""
        result = self.client.request_json(self.resource.record_url(record_id, action), method=method, json=payload or {})
        self.last_result = result
        if not result.ok:
            logger.info("%s on %s %s failed: %s", action, self.resource.name, record_id, result.message)
            return Notification.error(result.message)
        self.load()
        return Notification.success(success_message or f"{self.resource.title}: {action} done.")

    @property
    def session_expired(self) -> bool:
        return self.last_result is not None and self.last_result.is_unauthorized

    # --- helpers ---

    def _prepare(self, record: Dict[str, Any]) -> Dict[str, Any]:
        transform = self.resource.transform
        return transform(dict(record)) if transform else record

    def _parse_page(self, body: Dict[str, Any], requested_page: int):
        data = body.get("data") if isinstance(body.get("data"), dict) else body
        raw = data.get(self.resource.collection_key) or []
        if not isinstance(raw, list):
            raw = []
        records = [self._prepare(r) for r in raw if isinstance(r, dict)]
        pagination = data.get("pagination") if isinstance(data.get("pagination"), dict) else {}
        total_count = _to_int(pagination.get("totalCount", pagination.get("total")), len(records))
        total_pages = max(_to_int(pagination.get("totalPages", pagination.get("pages")), 1), 1)
        page = _to_int(pagination.get("currentPage", pagination.get("page")), requested_page)
        return records, total_count, total_pages, page

    @property
    def _snapshot_key(self):
        return (self.session_id, self.resource.name)

    def _restore_snapshot(self) -> None:
        if self.snapshots is None or not self.session_id:
            return
        snapshot = self.snapshots.get(self._snapshot_key)
        if snapshot is not None:
            self.records = list(snapshot.records)
            self.total_count = snapshot.total_count
            self.total_pages = snapshot.total_pages
            self.page = snapshot.page

    def _save_snapshot(self) -> None:
        if self.snapshots is None or not self.session_id:
            return
        self.snapshots.put(
            self._snapshot_key,
            Snapshot(list(self.records), self.total_count, self.total_pages, self.page),
        )
