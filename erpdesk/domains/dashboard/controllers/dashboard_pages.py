"""Dashboard page."""

from __future__ import annotations

from flask import Blueprint, render_template

from erpdesk.core.auth.guard import auth_guard
from erpdesk.core.auth.services import get_auth_client
from erpdesk.core.pages.crud import end_session
from erpdesk.domains.dashboard.services.dashboard_service import load_dashboard

dashboard_pages_bp = Blueprint("dashboard_pages", __name__)


@dashboard_pages_bp.get("")
@auth_guard()
def dashboard():
    panels = load_dashboard(get_auth_client())
    if any(panel.unauthorized for panel in panels.values()):
        return end_session()
    return render_template("dashboard/index.html", panels=panels)
