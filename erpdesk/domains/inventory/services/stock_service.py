"""Stock level classification for the inventory status screen."""

from __future__ import annotations

from typing import Any, Dict

# At or above this share of the maximum, stock counts as HIGH.
HIGH_STOCK_RATIO = 0.8


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def stock_level(current: Any, minimum: Any, maximum: Any) -> str:
    current, minimum, maximum = _number(current), _number(minimum), _number(maximum)
    if current <= minimum:
        return "LOW"
    if maximum and current >= maximum * HIGH_STOCK_RATIO:
        return "HIGH"
    return "NORMAL"


def with_stock_level(record: Dict[str, Any]) -> Dict[str, Any]:
    record["stockLevel"] = stock_level(record.get("currentStock"), record.get("minStock"), record.get("maxStock"))
    return record
