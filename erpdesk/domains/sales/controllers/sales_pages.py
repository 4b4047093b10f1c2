"""Sales HTML pages."""

from __future__ import annotations

from flask import Blueprint

from erpdesk.core.pages.crud import CrudViews
from erpdesk.domains.sales.resources import sales_orders

sales_pages_bp = Blueprint("sales_pages", __name__)

CrudViews(sales_orders).register(sales_pages_bp, "/orders")
