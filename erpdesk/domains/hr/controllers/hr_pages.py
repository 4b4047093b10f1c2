"""HR HTML pages."""

from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint

from erpdesk.core.auth.services import get_auth_client
from erpdesk.core.pages.controller import ListQuery, PageController
from erpdesk.core.pages.crud import CrudViews
from erpdesk.domains.hr.resources import employees
from erpdesk.domains.hr.services.employee_service import department_names

hr_pages_bp = Blueprint("hr_pages", __name__)


class EmployeeViews(CrudViews):
    list_template = "hr/employees.html"

    def context(self, controller: PageController, query: ListQuery, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        ctx = super().context(controller, query, rows)
        ctx["departments"] = department_names(get_auth_client())
        return ctx

    def form_values(self, record: Dict[str, Any]) -> Dict[str, Any]:
        values = dict(record)
        for key in ("hireDate", "birthDate"):
            if isinstance(values.get(key), str):
                values[key] = values[key].split("T")[0]
        return values


EmployeeViews(employees).register(hr_pages_bp, "/employees")
