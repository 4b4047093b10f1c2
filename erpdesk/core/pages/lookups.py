"""Option lists for select inputs (suppliers, items, warehouses, departments)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from erpdesk.core.auth.auth_client import AuthClient

logger = logging.getLogger(__name__)

Option = Tuple[str, str]


def _option(entry: Any, label_field: str) -> Optional[Option]:
    if isinstance(entry, str):
        return (entry, entry)
    if not isinstance(entry, dict):
        return None
    value = entry.get("_id") or entry.get("id")
    if value is None:
        return None
    label = entry.get(label_field) or entry.get("name") or str(value)
    code = entry.get("code")
    return (str(value), f"{code} {label}" if code else str(label))


def lookup_options(
    client: AuthClient,
    endpoint: str,
    collection_key: str,
    params: Optional[Dict[str, Any]] = None,
    label_field: str = "name",
) -> List[Option]:
    """Fetch ``(value, label)`` pairs; an empty list means the form falls back to free text."""
    result = client.request_json(endpoint, params=params)
    if not result.ok:
        logger.warning("Lookup %s failed: %s", endpoint, result.message)
        return []
    body = result.value or {}
    data = body.get("data", body) if isinstance(body, dict) else body
    raw = data.get(collection_key) if isinstance(data, dict) else data
    if not isinstance(raw, list):
        return []
    return [opt for opt in (_option(entry, label_field) for entry in raw) if opt is not None]


def supplier_options(client: AuthClient) -> List[Option]:
    return lookup_options(client, "/api/companies", "companies", params={"type": "SUPPLIER"})


def item_options(client: AuthClient) -> List[Option]:
    return lookup_options(client, "/api/items", "items")


def warehouse_options(client: AuthClient) -> List[Option]:
    return lookup_options(client, "/api/inventory/warehouses", "warehouses")
