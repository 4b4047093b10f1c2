"""Dashboard panels. Each panel loads on its own; one failing leaves the others intact."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from erpdesk.core.auth.auth_client import AuthClient

logger = logging.getLogger(__name__)

PANELS = {
    "stats": "/api/dashboard/stats",
    "recent_orders": "/api/dashboard/recent-orders",
    "work_orders": "/api/dashboard/work-orders",
}


@dataclass
class Panel:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    unauthorized: bool = False


def load_panel(client: AuthClient, path: str) -> Panel:
    result = client.request_json(path)
    if not result.ok:
        logger.warning("Dashboard panel %s failed: %s", path, result.message)
        return Panel(error=result.message, unauthorized=result.is_unauthorized)
    data = (result.value or {}).get("data")
    rows = [row for row in data if isinstance(row, dict)] if isinstance(data, list) else []
    return Panel(rows=rows)


def load_dashboard(client: AuthClient) -> Dict[str, Panel]:
    panels: Dict[str, Panel] = {}
    for name, path in PANELS.items():
        panel = load_panel(client, path)
        panels[name] = panel
        if panel.unauthorized:
            # The token is gone; the remaining panels would fail the same way.
            break
    return panels
