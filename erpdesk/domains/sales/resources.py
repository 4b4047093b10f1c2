"""Sales order collection."""

from __future__ import annotations

from erpdesk.core.pages.resources import Choice, Column, Resource, registry

SALES_ORDER_STATUSES = ("PENDING", "CONFIRMED", "PRODUCING", "SHIPPED", "COMPLETED")
CUSTOMER_TYPES = ("DOMESTIC", "EXPORT")

sales_orders = registry.register(
    Resource(
        name="sales_orders",
        title="Sales order",
        endpoint="/api/sales/orders",
        collection_key="orders",
        columns=(
            Column("orderNumber", "Order No.", 16),
            Column("customerName", "Customer", 22),
            Column("customerType", "Type", 10),
            Column("orderDate", "Order date", 12),
            Column("deliveryDate", "Delivery", 12),
            Column("status", "Status", 12),
            Column("totalAmount", "Amount", 14),
            Column("currency", "Currency", 8),
            Column("salesRep", "Sales rep", 14),
        ),
        search_fields=("orderNumber", "customerName", "salesRep"),
        filters=(
            Choice("status", "Status", SALES_ORDER_STATUSES, remote=True),
            Choice("customerType", "Customer type", CUSTOMER_TYPES),
        ),
        date_field="orderDate",
    )
)
