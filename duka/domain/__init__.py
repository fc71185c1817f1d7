"""Domain models and types for duka.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Pricing and inventory math separated from the CLI
"""

from duka.domain.models import ExpiryStatus, ItemName, Money, Quantity, StockStatus

__all__ = ["Money", "Quantity", "ItemName", "ExpiryStatus", "StockStatus"]
