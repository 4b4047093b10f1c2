"""Quality domain controllers."""

from erpdesk.domains.quality.controllers.quality_pages import quality_pages_bp

__all__ = ["quality_pages_bp"]
