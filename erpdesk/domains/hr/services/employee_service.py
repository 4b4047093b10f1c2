"""Employee lookups."""

from __future__ import annotations

from typing import List

from erpdesk.core.auth.auth_client import AuthClient
from erpdesk.core.pages.lookups import lookup_options


def department_names(client: AuthClient) -> List[str]:
    """Departments known to the API; empty when the list cannot be loaded."""
    return [value for value, _ in lookup_options(client, "/api/employees/departments/list", "departments")]
