"""Production domain controllers."""

from erpdesk.domains.production.controllers.production_pages import production_pages_bp

__all__ = ["production_pages_bp"]
