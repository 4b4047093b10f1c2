"""Inventory collections: stock movements and current stock."""

from __future__ import annotations

from erpdesk.core.pages.resources import Choice, Column, Resource, registry
from erpdesk.domains.inventory.schemas.inventory_schemas import STOCK_LEVELS
from erpdesk.domains.inventory.services.stock_service import with_stock_level
from erpdesk.domains.master.schemas.master_schemas import ITEM_CATEGORIES

TRANSACTION_COLUMNS = (
    Column("transactionNumber", "Transaction No.", 18),
    Column("transactionDate", "Date", 12),
    Column("itemCode", "Item code", 14),
    Column("itemName", "Item", 22),
    Column("warehouseName", "Warehouse", 16),
    Column("quantity", "Quantity", 10),
    Column("unitPrice", "Unit price", 12),
    Column("totalValue", "Value", 14),
    Column("previousQuantity", "Before", 10),
    Column("currentQuantity", "After", 10),
    Column("referenceNumber", "Reference", 16),
    Column("reason", "Reason", 24),
    Column("userName", "By", 12),
)


def _transactions(name: str, title: str, transaction_type: str, export_name: str) -> Resource:
    return Resource(
        name=name,
        title=title,
        endpoint="/api/inventory/transactions",
        collection_key="transactions",
        columns=TRANSACTION_COLUMNS,
        search_fields=("transactionNumber", "itemName", "itemCode", "referenceNumber"),
        remote_filters=("warehouseId",),
        fixed_params={"transactionType": transaction_type},
        date_field="transactionDate",
        export_name=export_name,
    )


incoming = registry.register(_transactions("incoming", "Incoming stock", "IN", "incoming_transactions"))
outgoing = registry.register(_transactions("outgoing", "Outgoing stock", "OUT", "outgoing_transactions"))

inventory_status = registry.register(
    Resource(
        name="inventory_status",
        title="Inventory",
        endpoint="/api/inventory/status",
        collection_key="inventory",
        columns=(
            Column("itemCode", "Item code", 14),
            Column("itemName", "Item", 22),
            Column("category", "Category", 16),
            Column("warehouse", "Warehouse", 16),
            Column("currentStock", "On hand", 10),
            Column("reservedStock", "Reserved", 10),
            Column("availableStock", "Available", 10),
            Column("unit", "Unit", 8),
            Column("minStock", "Min", 8),
            Column("maxStock", "Max", 8),
            Column("stockLevel", "Level", 8),
            Column("averageCost", "Avg. cost", 12),
            Column("totalValue", "Value", 14),
            Column("lastMovement", "Last movement", 14),
        ),
        search_fields=("itemCode", "itemName"),
        filters=(
            Choice("category", "Category", ITEM_CATEGORIES),
            Choice("stockLevel", "Stock level", STOCK_LEVELS),
        ),
        remote_filters=("warehouseId",),
        paginated=False,
        transform=with_stock_level,
        export_name="inventory_status",
    )
)
