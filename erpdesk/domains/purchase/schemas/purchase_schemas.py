"""Forms for purchase requests, approvals, purchase orders and receipts."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, model_validator

from erpdesk.core.pages.forms import ApiForm

Priority = Literal["LOW", "MEDIUM", "HIGH", "URGENT"]

PRIORITIES = ("LOW", "MEDIUM", "HIGH", "URGENT")
REQUEST_STATUSES = ("DRAFT", "SUBMITTED", "APPROVED", "REJECTED", "ORDERED", "CANCELLED")
ORDER_STATUSES = ("PENDING", "APPROVED", "RECEIVED", "COMPLETED")
RECEIPT_STATUSES = ("RECEIVED", "INSPECTED", "APPROVED", "REJECTED", "COMPLETED")


# --- purchase requests ---


class PurchaseRequestLine(ApiForm):
    item_name: Optional[str] = Field(default=None, alias="itemName")
    item_code: Optional[str] = Field(default=None, alias="itemCode")
    category: Optional[str] = None
    quantity: float = 1
    unit: str = "EA"
    estimated_price: float = Field(default=0, ge=0, alias="estimatedPrice")
    required_date: Optional[date] = Field(default=None, alias="requiredDate")
    purpose: Optional[str] = None
    specification: Optional[str] = None
    notes: Optional[str] = None

    @property
    def total_price(self) -> float:
        return self.quantity * self.estimated_price

    def api_payload(self) -> Dict[str, Any]:
        payload = super().api_payload()
        payload["totalPrice"] = self.total_price
        return payload


class PurchaseRequestForm(ApiForm):
    """Draft form: saved as-is, business rules are only enforced on submit."""

    line_prefix = "items"

    department: Optional[str] = Field(default=None, max_length=100)
    purpose: Optional[str] = None
    priority: Priority = "MEDIUM"
    required_date: Optional[date] = Field(default=None, alias="requiredDate")
    justification: Optional[str] = None
    items: List[PurchaseRequestLine] = Field(default_factory=list)

    status: Literal["DRAFT", "SUBMITTED"] = "DRAFT"

    @property
    def total_amount(self) -> float:
        return sum(line.total_price for line in self.items)

    def api_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True, exclude_none=True, exclude={"items"}, mode="json")
        payload["items"] = [line.api_payload() for line in self.items]
        payload["totalAmount"] = self.total_amount
        return payload


class PurchaseRequestSubmission(PurchaseRequestForm):
    status: Literal["DRAFT", "SUBMITTED"] = "SUBMITTED"

    @model_validator(mode="after")
    def ready_to_submit(self) -> "PurchaseRequestSubmission":
        if not self.department:
            raise ValueError("department is required")
        if not self.purpose:
            raise ValueError("purpose is required")
        if not self.items:
            raise ValueError("at least one item is required")
        if any(not line.item_name or not line.purpose for line in self.items):
            raise ValueError("every item needs a name and a purpose")
        if any(line.quantity <= 0 for line in self.items):
            raise ValueError("quantity must be greater than zero")
        return self


class ApprovalDecision(ApiForm):
    decision: Literal["approve", "reject"]
    comments: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def reject_needs_comments(self) -> "ApprovalDecision":
        if self.decision == "reject" and not self.comments:
            raise ValueError("a reason is required to reject a request")
        return self

    def api_payload(self) -> Dict[str, Any]:
        return {"comments": self.comments or ""}


# --- purchase orders ---


class PurchaseOrderLine(ApiForm):
    item_id: str = Field(alias="itemId", min_length=1)
    quantity: float = Field(gt=0)
    unit_price: float = Field(default=0, ge=0, alias="unitPrice")


class PurchaseOrderForm(ApiForm):
    line_prefix = "items"

    supplier_id: str = Field(alias="supplierId", min_length=1)
    order_date: date = Field(alias="orderDate")
    expected_delivery_date: Optional[date] = Field(default=None, alias="expectedDeliveryDate")
    delivery_address: Optional[str] = Field(default=None, alias="deliveryAddress")
    terms: Optional[str] = None
    notes: Optional[str] = None
    items: List[PurchaseOrderLine] = Field(min_length=1)

    @model_validator(mode="after")
    def delivery_after_order(self) -> "PurchaseOrderForm":
        if self.expected_delivery_date and self.expected_delivery_date < self.order_date:
            raise ValueError("expected delivery date cannot be before the order date")
        return self


# --- receipts ---


class ReceiptLine(ApiForm):
    item_id: Optional[str] = Field(default=None, alias="itemId")
    item_name: Optional[str] = Field(default=None, alias="itemName")
    item_code: Optional[str] = Field(default=None, alias="itemCode")
    ordered_quantity: float = Field(default=0, ge=0, alias="orderedQuantity")
    received_quantity: float = Field(default=0, ge=0, alias="receivedQuantity")
    unit_price: float = Field(default=0, ge=0, alias="unitPrice")
    notes: Optional[str] = None

    @property
    def total_price(self) -> float:
        return self.received_quantity * self.unit_price


class ReceiptForm(ApiForm):
    line_prefix = "items"

    purchase_order_number: Optional[str] = Field(default=None, alias="purchaseOrderNumber")
    supplier_id: str = Field(alias="supplierId", min_length=1)
    supplier_name: Optional[str] = Field(default=None, alias="supplierName")
    warehouse_id: str = Field(alias="warehouseId", min_length=1)
    warehouse_name: Optional[str] = Field(default=None, alias="warehouseName")
    receipt_date: date = Field(default_factory=date.today, alias="receiptDate")
    expected_delivery_date: Optional[date] = Field(default=None, alias="expectedDeliveryDate")
    remarks: Optional[str] = None
    items: List[ReceiptLine] = Field(default_factory=list)


class InspectionForm(ApiForm):
    inspection_notes: str = Field(default="Inspection completed", alias="inspectionNotes", max_length=500)
