"""Inventory domain controllers."""

from erpdesk.domains.inventory.controllers.inventory_pages import inventory_pages_bp

__all__ = ["inventory_pages_bp"]
