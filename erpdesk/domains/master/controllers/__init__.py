"""Master domain controllers."""

from erpdesk.domains.master.controllers.master_pages import master_pages_bp

__all__ = ["master_pages_bp"]
