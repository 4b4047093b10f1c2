"""HR domain controllers."""

from erpdesk.domains.hr.controllers.hr_pages import hr_pages_bp

__all__ = ["hr_pages_bp"]
