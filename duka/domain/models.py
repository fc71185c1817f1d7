"""Domain type definitions for duka.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in shillings (may carry fractional cents until rounded)
- Quantity: Count of units sold or held in stock
- ItemName: Name of a menu or inventory item
- ExpiryStatus: Freshness bucket of a perishable item
"""

from typing import Literal, NewType

# Money amounts are shillings; rounded totals are whole shillings
Money = NewType("Money", float)

Quantity = NewType("Quantity", int)

ItemName = NewType("ItemName", str)

ExpiryStatus = Literal["expired", "expiring-soon", "expiring-week", "fresh"]

StockStatus = Literal["out-of-stock", "low-stock", "in-stock"]
