"""Quality HTML pages."""

from __future__ import annotations

from flask import Blueprint

from erpdesk.core.pages.crud import CrudViews
from erpdesk.domains.quality.resources import inspections

quality_pages_bp = Blueprint("quality_pages", __name__)

CrudViews(inspections).register(quality_pages_bp, "/inspections")
