"""Purchasing collections."""

from __future__ import annotations

from erpdesk.core.auth.roles import Role
from erpdesk.core.pages.resources import Choice, Column, Resource, registry
from erpdesk.domains.purchase.schemas.purchase_schemas import (
    ORDER_STATUSES,
    PRIORITIES,
    RECEIPT_STATUSES,
    REQUEST_STATUSES,
    PurchaseOrderForm,
)
from erpdesk.domains.purchase.services.purchase_service import present_order

REQUEST_COLUMNS = (
    Column("requestNumber", "Request No.", 16),
    Column("requester.name", "Requester", 14),
    Column("department", "Department", 16),
    Column("purpose", "Purpose", 30),
    Column("priority", "Priority", 10),
    Column("status", "Status", 12),
    Column("totalAmount", "Amount", 14),
    Column("requestDate", "Requested", 12),
    Column("requiredDate", "Required by", 12),
)

purchase_requests = registry.register(
    Resource(
        name="purchase_requests",
        title="Purchase request",
        endpoint="/api/purchase-requests",
        collection_key="requests",
        item_key="request",
        columns=REQUEST_COLUMNS,
        search_fields=("requestNumber", "purpose", "department", "requester.name"),
        filters=(
            Choice("status", "Status", REQUEST_STATUSES, remote=True),
            Choice("priority", "Priority", PRIORITIES, remote=True),
        ),
        remote_filters=("department",),
        date_field="requestDate",
        deletable=True,
        update_method="PUT",
        export_name="purchase_requests",
    )
)

pending_requests = registry.register(
    Resource(
        name="pending_requests",
        title="Purchase request",
        endpoint="/api/purchase-requests/pending/approval",
        record_endpoint="/api/purchase-requests",
        collection_key="requests",
        columns=REQUEST_COLUMNS,
        search_fields=("requestNumber", "purpose", "department", "requester.name"),
        filters=(Choice("priority", "Priority", PRIORITIES),),
        paginated=False,
        view_role=Role.MANAGER,
        mutate_role=Role.MANAGER,
        export_name="pending_purchase_requests",
    )
)

purchase_orders = registry.register(
    Resource(
        name="purchase_orders",
        title="Purchase order",
        endpoint="/api/purchase/orders",
        collection_key="orders",
        item_key="order",
        columns=(
            Column("orderNumber", "Order No.", 16),
            Column("supplierName", "Supplier", 22),
            Column("orderDate", "Order date", 12),
            Column("expectedDate", "Expected", 12),
            Column("status", "Status", 12),
            Column("totalAmount", "Amount", 14),
        ),
        search_fields=("orderNumber", "supplierName"),
        filters=(Choice("status", "Status", ORDER_STATUSES),),
        paginated=False,
        deletable=True,
        update_method="PUT",
        mutate_role=Role.MANAGER,
        form_schema=PurchaseOrderForm,
        transform=present_order,
    )
)

receipts = registry.register(
    Resource(
        name="receipts",
        title="Receipt",
        endpoint="/api/receipts",
        collection_key="receipts",
        item_key="receipt",
        columns=(
            Column("receiptNumber", "Receipt No.", 16),
            Column("purchaseOrderNumber", "PO No.", 16),
            Column("supplierName", "Supplier", 22),
            Column("warehouseName", "Warehouse", 16),
            Column("receiptDate", "Received", 12),
            Column("totalQuantity", "Quantity", 10),
            Column("totalAmount", "Amount", 14),
            Column("status", "Status", 12),
        ),
        search_fields=("receiptNumber", "purchaseOrderNumber", "supplierName"),
        filters=(Choice("status", "Status", RECEIPT_STATUSES, remote=True),),
        remote_filters=("warehouseId", "startDate", "endDate"),
        date_field="receiptDate",
        deletable=True,
        update_method="PUT",
    )
)
