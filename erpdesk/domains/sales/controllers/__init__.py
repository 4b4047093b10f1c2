"""Sales domain controllers."""

from erpdesk.domains.sales.controllers.sales_pages import sales_pages_bp

__all__ = ["sales_pages_bp"]
