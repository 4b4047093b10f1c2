"""Production HTML pages."""

from __future__ import annotations

from flask import Blueprint

from erpdesk.core.pages.crud import CrudViews
from erpdesk.domains.production.resources import work_orders

production_pages_bp = Blueprint("production_pages", __name__)

CrudViews(work_orders).register(production_pages_bp, "/work-orders")
