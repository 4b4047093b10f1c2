"""Purchasing rules applied before data is shown or sent to the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from erpdesk.core.pages.forms import flatten_lines
from erpdesk.domains.purchase.schemas.purchase_schemas import ReceiptForm, ReceiptLine

# Order lifecycle on the API side collapsed to the four states the screens show.
ORDER_STATUS_MAP = {
    "DRAFT": "PENDING",
    "SENT": "PENDING",
    "CONFIRMED": "APPROVED",
    "PARTIALLY_RECEIVED": "RECEIVED",
    "RECEIVED": "RECEIVED",
}


def convert_order_status(status: Any) -> str:
    return ORDER_STATUS_MAP.get(str(status or "").upper(), "PENDING")


def _date_part(value: Any) -> str:
    return value.split("T")[0] if isinstance(value, str) else ""


def present_order(order: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a purchase order from the API into table-friendly fields."""
    supplier = order.get("supplier") or order.get("supplierId")
    order["apiStatus"] = order.get("status")
    order["status"] = convert_order_status(order.get("status"))
    order["supplierName"] = supplier.get("name") if isinstance(supplier, dict) and supplier.get("name") else "Unknown"
    order["orderDate"] = _date_part(order.get("orderDate"))
    order["expectedDate"] = _date_part(order.get("expectedDeliveryDate")) or order["orderDate"]
    lines = []
    for line in order.get("items") or []:
        if not isinstance(line, dict):
            continue
        item = line.get("item") or line.get("itemId")
        lines.append(
            {
                "itemId": item.get("_id") if isinstance(item, dict) else item,
                "itemName": item.get("name") if isinstance(item, dict) and item.get("name") else "Unknown Item",
                "quantity": line.get("quantity"),
                "unitPrice": line.get("unitPrice"),
                "totalPrice": line.get("totalPrice"),
            }
        )
    order["items"] = lines
    return order


@dataclass
class ReceiptDraft:
    payload: Dict[str, Any]
    lines: List[ReceiptLine]
    warnings: List[str] = field(default_factory=list)

    @property
    def total_amount(self) -> float:
        return sum(line.total_price for line in self.lines)

    @property
    def total_quantity(self) -> float:
        return sum(line.received_quantity for line in self.lines)


def reconcile_receipt(form: ReceiptForm) -> ReceiptDraft:
    """Keep only lines with an item and a received quantity, then total them.

    Receiving more than was ordered is allowed but reported as a warning.
    """
    kept = [line for line in form.items if line.item_id and line.received_quantity > 0]
    warnings = [
        f"{line.item_name or line.item_id}: received {line.received_quantity:g} exceeds ordered {line.ordered_quantity:g}"
        for line in kept
        if line.ordered_quantity and line.received_quantity > line.ordered_quantity
    ]
    payload = form.model_dump(by_alias=True, exclude_none=True, exclude={"items"}, mode="json")
    draft = ReceiptDraft(payload=payload, lines=kept, warnings=warnings)
    payload["items"] = [
        {**line.api_payload(), "totalPrice": line.total_price} for line in kept
    ]
    payload["totalAmount"] = draft.total_amount
    payload["totalQuantity"] = draft.total_quantity
    return draft


def order_form_values(order: Dict[str, Any]) -> Dict[str, Any]:
    """Pre-fill the order form from a record already passed through :func:`present_order`."""
    supplier = order.get("supplierId") or order.get("supplier")
    values = {
        "supplierId": supplier.get("_id") if isinstance(supplier, dict) else supplier,
        "orderDate": order.get("orderDate"),
        "expectedDeliveryDate": order.get("expectedDate"),
        "deliveryAddress": order.get("deliveryAddress"),
        "terms": order.get("terms"),
        "notes": order.get("notes"),
    }
    values.update(
        flatten_lines(
            [
                {"itemId": line.get("itemId"), "quantity": line.get("quantity"), "unitPrice": line.get("unitPrice")}
                for line in order.get("items") or []
            ]
        )
    )
    return {k: v for k, v in values.items() if v is not None}
