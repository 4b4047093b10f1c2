"""Production collections."""

from __future__ import annotations

from erpdesk.core.pages.resources import Choice, Column, Resource, registry

WORK_ORDER_STATUSES = ("PENDING", "IN_PROGRESS", "COMPLETED", "PAUSED")
WORK_ORDER_PRIORITIES = ("LOW", "NORMAL", "HIGH", "URGENT")

work_orders = registry.register(
    Resource(
        name="work_orders",
        title="Work order",
        endpoint="/api/work-orders",
        collection_key="workOrders",
        columns=(
            Column("orderNumber", "Work order No.", 16),
            Column("itemCode", "Item code", 14),
            Column("itemName", "Item", 22),
            Column("quantity", "Quantity", 10),
            Column("completedQuantity", "Completed", 10),
            Column("unit", "Unit", 8),
            Column("workCenter", "Work center", 16),
            Column("startDate", "Start", 12),
            Column("endDate", "End", 12),
            Column("status", "Status", 12),
            Column("priority", "Priority", 10),
            Column("assignedTo", "Assigned to", 14),
        ),
        search_fields=("orderNumber", "itemName", "itemCode", "workCenter"),
        filters=(
            Choice("status", "Status", WORK_ORDER_STATUSES, remote=True),
            Choice("priority", "Priority", WORK_ORDER_PRIORITIES),
        ),
        date_field="startDate",
    )
)
