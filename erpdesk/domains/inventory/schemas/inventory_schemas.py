"""Forms for stock movements."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from erpdesk.core.pages.forms import ApiForm

STOCK_LEVELS = ("LOW", "NORMAL", "HIGH")
TRANSACTION_TYPES = ("IN", "OUT")


class IssueLine(ApiForm):
    item_id: str = Field(alias="itemId", min_length=1)
    item_name: Optional[str] = Field(default=None, alias="itemName")
    quantity: float = Field(gt=0)


class IssueForm(ApiForm):
    """Outgoing shipment of one or more items from a warehouse."""

    line_prefix = "items"

    warehouse_id: str = Field(alias="warehouseId", min_length=1)
    reason: str = Field(min_length=1, max_length=200)
    items: List[IssueLine] = Field(min_length=1)
