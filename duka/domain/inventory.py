"""Pure functions for stock levels, expiry and inventory valuation.

This module contains the functional core for inventory operations:
- No I/O operations (no console, no files)
- No side effects beyond reading the clock when no reference time is given
- Pure data transformations
- Easy to test

All monetary amounts are in shillings (Money type).
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TypedDict

from duka.dates import days_until, parse_expiry_date
from duka.domain.models import ExpiryStatus, ItemName, Money, Quantity, StockStatus
from duka.domain.pricing import parse_amount, parse_quantity

UNCATEGORISED = "Other"


class StockLine(TypedDict):
    """Stock holding carrying quantity and unit cost."""

    quantity: int
    cost: float


@dataclass(frozen=True)
class InventoryItem:
    """Immutable inventory item."""

    name: ItemName
    quantity: Quantity
    cost: Money  # per unit
    min_stock: Quantity = Quantity(0)
    unit: str = ""
    category: str | None = None
    expiry_date: datetime | None = None


@dataclass(frozen=True)
class InventorySummary:
    """Immutable inventory summary."""

    total_items: int
    total_value: Money
    low_stock: int  # at or below minimum, out-of-stock items included
    out_of_stock: int
    expired: int
    expiring: int
    by_category: dict[str, Money] = field(default_factory=dict)


def get_expiry_status(expiry_date: date | datetime | None, now: datetime | None = None) -> ExpiryStatus | None:
    """Classify an item's freshness by days left until expiry.

    Args:
        expiry_date: Expiry date, or None if expiry is not tracked.
        now: Reference instant. Defaults to the current time.

    Returns:
        "expired" (days < 0), "expiring-soon" (0-3 days), "expiring-week"
        (4-7 days), "fresh" (more than 7 days), or None when untracked.
    """
    if expiry_date is None:
        return None

    if now is None:
        now = datetime.now()

    days = days_until(expiry_date, now)

    if days < 0:
        return "expired"
    if days <= 3:
        return "expiring-soon"
    if days <= 7:
        return "expiring-week"
    return "fresh"


def is_low_stock(quantity: int, min_stock: int) -> bool:
    """Check whether stock is at or below its minimum."""
    return quantity <= min_stock


def calculate_inventory_value(items: Iterable[StockLine]) -> Money:
    """Sum quantity * cost over all holdings (0 for no items)."""
    return Money(sum((item["quantity"] * item["cost"] for item in items), 0))


def get_stock_status(quantity: int, min_stock: int) -> StockStatus:
    """Classify stock on hand.

    Args:
        quantity: Units on hand.
        min_stock: Reorder threshold.

    Returns:
        "out-of-stock" when nothing is left, "low-stock" at or below the
        threshold, otherwise "in-stock".
    """
    if quantity <= 0:
        return "out-of-stock"
    if is_low_stock(quantity, min_stock):
        return "low-stock"
    return "in-stock"


def calculate_stock_level(quantity: int, min_stock: int) -> float:
    """Calculate stock on hand as a percentage of twice the minimum.

    Args:
        quantity: Units on hand.
        min_stock: Reorder threshold.

    Returns:
        Percentage clamped to 0-100. Without a positive minimum, any stock
        on hand counts as full.
    """
    if min_stock <= 0:
        return 100.0 if quantity > 0 else 0.0
    return max(0.0, min(100.0, (quantity / (min_stock * 2)) * 100))


def summarize_inventory(items: list[InventoryItem], now: datetime | None = None) -> InventorySummary:
    """Calculate inventory totals and alert counts.

    Args:
        items: Inventory items.
        now: Reference instant for expiry checks. Defaults to the current time.

    Returns:
        InventorySummary with value, stock alerts and expiry alerts.
    """
    if now is None:
        now = datetime.now()

    total_value = calculate_inventory_value(StockLine(quantity=item.quantity, cost=item.cost) for item in items)

    low_stock = 0
    out_of_stock = 0
    expired = 0
    expiring = 0
    by_category: dict[str, Money] = {}

    for item in items:
        # Out-of-stock items are also at or below their minimum
        if is_low_stock(item.quantity, item.min_stock):
            low_stock += 1
        if get_stock_status(item.quantity, item.min_stock) == "out-of-stock":
            out_of_stock += 1

        expiry_status = get_expiry_status(item.expiry_date, now)
        if expiry_status == "expired":
            expired += 1
        elif expiry_status in ("expiring-soon", "expiring-week"):
            expiring += 1

        category = item.category or UNCATEGORISED
        by_category[category] = Money(by_category.get(category, 0) + item.quantity * item.cost)

    return InventorySummary(
        total_items=len(items),
        total_value=total_value,
        low_stock=low_stock,
        out_of_stock=out_of_stock,
        expired=expired,
        expiring=expiring,
        by_category=by_category,
    )


def parse_inventory_row(row: dict[str, str]) -> InventoryItem | None:
    """Parse a CSV row into an inventory item.

    Expected columns are name, quantity and cost, with optional min_stock,
    unit, category and expiry_date.

    Args:
        row: CSV row as dictionary.

    Returns:
        InventoryItem if valid, None if row should be skipped.
    """
    name = (row.get("name") or "").strip()
    if not name:
        return None

    try:
        quantity = parse_quantity(row.get("quantity") or "")
        cost = parse_amount(row.get("cost") or "")
        min_stock = parse_quantity((row.get("min_stock") or "").strip() or "0")
        expiry_date = parse_expiry_date(row.get("expiry_date") or "")
    except ValueError:
        return None

    return InventoryItem(
        name=ItemName(name),
        quantity=Quantity(quantity),
        cost=Money(cost),
        min_stock=Quantity(min_stock),
        unit=(row.get("unit") or "").strip(),
        category=(row.get("category") or "").strip() or None,
        expiry_date=expiry_date,
    )
