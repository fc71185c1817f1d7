"""Pure functions for VAT, sale totals and change.

This module contains the functional core for till operations:
- No I/O operations (no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in shillings (Money type). Totals shown to the
customer are rounded to the nearest whole shilling.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypedDict

from duka.domain.models import ItemName, Money, Quantity

# 16% VAT; callers pass their configured rate to override it
VAT_RATE = 0.16


class PricedLine(TypedDict):
    """Sale line carrying the pre-tax unit price."""

    base_price: float
    quantity: int


class TaxedLine(TypedDict):
    """Sale line carrying the per-unit VAT already charged."""

    vat_amount: float
    quantity: int


@dataclass(frozen=True)
class SaleLine:
    """Immutable priced cart line as shown at the till."""

    name: ItemName
    base_price: Money
    quantity: Quantity
    vat_amount: Money
    total_price: int  # per unit, VAT inclusive, whole shillings


@dataclass(frozen=True)
class SaleTotals:
    """Immutable totals for a complete sale."""

    subtotal: Money
    vat_total: Money
    total: int
    amount_paid: Money | None
    change: Money


def round_half_up(amount: float) -> int:
    """Round to the nearest whole shilling, halves going up.

    Unlike the builtin round(), 2.5 becomes 3 and -2.5 becomes -2.

    Args:
        amount: Amount in shillings.

    Returns:
        Whole shillings.
    """
    return math.floor(amount + 0.5)


def calculate_vat(base_price: float, vat_rate: float = VAT_RATE) -> Money:
    """Calculate VAT due on a base price (unrounded)."""
    return Money(base_price * vat_rate)


def calculate_total_price(base_price: float, vat_rate: float = VAT_RATE) -> int:
    """Calculate the VAT-inclusive price rounded to the nearest shilling.

    Args:
        base_price: Pre-tax price in shillings.
        vat_rate: VAT rate as a fraction (0.16 for 16%).

    Returns:
        Total price in whole shillings.
    """
    vat_amount = calculate_vat(base_price, vat_rate)
    return round_half_up(base_price + vat_amount)


def calculate_sale_subtotal(items: Iterable[PricedLine]) -> Money:
    """Sum base_price * quantity over all lines (0 for an empty sale)."""
    return Money(sum((item["base_price"] * item["quantity"] for item in items), 0))


def calculate_sale_vat_total(items: Iterable[TaxedLine]) -> Money:
    """Sum vat_amount * quantity over all lines.

    The per-line vat_amount is used as supplied and is never recomputed
    from a base price, so exempt or specially-taxed lines can carry their
    own amount.
    """
    return Money(sum((item["vat_amount"] * item["quantity"] for item in items), 0))


def calculate_sale_total(subtotal: float, vat_total: float) -> int:
    """Calculate the sale total rounded to the nearest shilling."""
    return round_half_up(subtotal + vat_total)


def calculate_change(amount_paid: float, total: float) -> Money:
    """Calculate change due to the customer.

    Args:
        amount_paid: Cash handed over in shillings.
        total: Sale total in shillings.

    Returns:
        Change in shillings, never negative (a short payment gives 0).
    """
    return Money(max(0, amount_paid - total))


def build_sale_line(
    name: ItemName,
    base_price: Money,
    quantity: Quantity,
    vat_rate: float = VAT_RATE,
) -> SaleLine:
    """Price a single cart line.

    Args:
        name: Item name.
        base_price: Pre-tax unit price in shillings.
        quantity: Units sold.
        vat_rate: VAT rate as a fraction.

    Returns:
        SaleLine with per-unit VAT and per-unit VAT-inclusive price.
    """
    return SaleLine(
        name=name,
        base_price=base_price,
        quantity=quantity,
        vat_amount=calculate_vat(base_price, vat_rate),
        total_price=calculate_total_price(base_price, vat_rate),
    )


def calculate_sale_totals(lines: list[SaleLine], amount_paid: Money | None = None) -> SaleTotals:
    """Calculate subtotal, VAT, rounded total and change for a sale.

    Args:
        lines: Priced cart lines.
        amount_paid: Cash handed over, or None if not paid yet.

    Returns:
        SaleTotals for the sale.
    """
    priced = [PricedLine(base_price=line.base_price, quantity=line.quantity) for line in lines]
    taxed = [TaxedLine(vat_amount=line.vat_amount, quantity=line.quantity) for line in lines]

    subtotal = calculate_sale_subtotal(priced)
    vat_total = calculate_sale_vat_total(taxed)
    total = calculate_sale_total(subtotal, vat_total)

    if amount_paid is None:
        change = Money(0)
    else:
        change = calculate_change(amount_paid, total)

    return SaleTotals(
        subtotal=subtotal,
        vat_total=vat_total,
        total=total,
        amount_paid=amount_paid,
        change=change,
    )


def parse_amount(raw: str) -> float:
    """Parse a shilling amount such as "KSH 1,250.50".

    Raises:
        ValueError: If the text is not a finite number.
    """
    cleaned = raw.strip().upper().replace("KSH", "").replace("KES", "").replace(",", "")
    amount = float(cleaned)
    if not math.isfinite(amount):
        raise ValueError(f"Amount must be finite, got '{raw.strip()}'")
    return amount


def parse_quantity(raw: str) -> int:
    """Parse a unit count such as "3" or "2.0".

    Raises:
        ValueError: If the text is not a finite number.
    """
    value = float(raw.strip())
    if not math.isfinite(value):
        raise ValueError(f"Quantity must be finite, got '{raw.strip()}'")
    return int(value)


def parse_sale_row(row: dict[str, str], vat_rate: float = VAT_RATE) -> SaleLine | None:
    """Parse a CSV row into a priced sale line.

    Expected columns are name, price and an optional quantity (default 1).

    Args:
        row: CSV row as dictionary.
        vat_rate: VAT rate as a fraction.

    Returns:
        SaleLine if valid, None if row should be skipped.
    """
    raw_price = (row.get("price") or "").strip()
    if not raw_price:
        return None

    name = (row.get("name") or "").strip() or "Unknown"
    raw_quantity = (row.get("quantity") or "").strip() or "1"

    try:
        price = parse_amount(raw_price)
        quantity = parse_quantity(raw_quantity)
    except ValueError:
        return None

    return build_sale_line(ItemName(name), Money(price), Quantity(quantity), vat_rate)


def format_money_display(amount: float, currency: str = "KSH") -> str:
    """Format money amount for display.

    Args:
        amount: Amount in shillings.
        currency: Currency label.

    Returns:
        Formatted string (e.g., "KSH 1,234.50", or "KSH 41" for whole amounts).
    """
    if float(amount).is_integer():
        formatted = f"{int(amount):,}"
    else:
        formatted = f"{amount:,.2f}"
    return f"{currency} {formatted}"
