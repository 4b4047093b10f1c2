"""Purchase domain controllers."""

from erpdesk.domains.purchase.controllers.purchase_pages import purchase_pages_bp

__all__ = ["purchase_pages_bp"]
