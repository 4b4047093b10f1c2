"""Dashboard domain controllers."""

from erpdesk.domains.dashboard.controllers.dashboard_pages import dashboard_pages_bp

__all__ = ["dashboard_pages_bp"]
