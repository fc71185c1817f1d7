"""Inventory commands for stock reports and expiry checks."""

import csv
import sys
import tomllib
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from duka.config import get_currency
from duka.dates import days_until, parse_expiry_date
from duka.domain.inventory import (
    InventoryItem,
    InventorySummary,
    calculate_stock_level,
    get_expiry_status,
    get_stock_status,
    is_low_stock,
    parse_inventory_row,
    summarize_inventory,
)
from duka.domain.pricing import format_money_display

console = Console()

EXPIRY_STYLES = {
    "expired": "[red]Expired[/red]",
    "expiring-soon": "[red]Expiring soon[/red]",
    "expiring-week": "[yellow]This week[/yellow]",
    "fresh": "[green]Fresh[/green]",
}

STOCK_STYLES = {
    "out-of-stock": "[red]Out of stock[/red]",
    "low-stock": "[yellow]Low stock[/yellow]",
    "in-stock": "[green]In stock[/green]",
}


def resolve_as_of(as_of: str | None) -> datetime:
    """Resolve the reference instant for expiry checks, exiting on bad input."""
    if not as_of:
        return datetime.now()

    try:
        parsed = parse_expiry_date(as_of)
    except ValueError as e:
        console.print(f"[red]Invalid date: {e}[/red]", style="bold")
        sys.exit(1)

    return parsed if parsed is not None else datetime.now()


def read_inventory(csv_path: Path) -> tuple[list[InventoryItem], int]:
    """Read inventory items from a CSV file.

    Args:
        csv_path: Path to CSV with name, quantity and cost columns.

    Returns:
        Tuple of (items, skipped_row_count).
    """
    items: list[InventoryItem] = []
    skipped = 0

    with open(csv_path, encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            normalized = {k.strip().lower(): v for k, v in row.items() if k}
            item = parse_inventory_row(normalized)
            if item is None:
                skipped += 1
                continue
            items.append(item)

    return items, skipped


def render_stock_bar(level: float, width: int = 10) -> str:
    """Render a stock level percentage as a bar."""
    filled = int(level / 100 * width)
    return "█" * filled + "░" * (width - filled)


def render_inventory(items: list[InventoryItem], now: datetime, currency: str) -> None:
    """Render inventory items as a table."""
    table = Table(title=f"Inventory (as of {now:%Y-%m-%d})")
    table.add_column("Item", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Qty", justify="right")
    table.add_column("Min", justify="right", style="dim")
    table.add_column("Level")
    table.add_column("Value", justify="right")
    table.add_column("Stock", justify="center")
    table.add_column("Expiry", justify="center")

    for item in items:
        quantity = f"{item.quantity} {item.unit}".strip()
        level = calculate_stock_level(item.quantity, item.min_stock)
        value = format_money_display(round(item.quantity * item.cost, 2), currency)
        stock = STOCK_STYLES[get_stock_status(item.quantity, item.min_stock)]

        expiry_status = get_expiry_status(item.expiry_date, now)
        if expiry_status is None or item.expiry_date is None:
            expiry = "[dim]-[/dim]"
        else:
            days = days_until(item.expiry_date, now)
            expiry = f"{EXPIRY_STYLES[expiry_status]} ({days}d)"

        table.add_row(
            item.name,
            item.category or "[dim]-[/dim]",
            quantity,
            str(item.min_stock),
            render_stock_bar(level),
            value,
            stock,
            expiry,
        )

    console.print(table)


def render_summary(summary: InventorySummary, currency: str) -> None:
    """Render inventory totals and alerts."""
    total_value = format_money_display(round(summary.total_value, 2), currency)
    console.print(f"\n[bold]Total inventory value: {total_value}[/bold]")
    console.print(f"  Items: {summary.total_items}")

    if summary.by_category:
        for category, value in sorted(summary.by_category.items(), key=lambda x: x[1], reverse=True):
            console.print(f"  {category:20} {format_money_display(round(value, 2), currency):>16}")

    if summary.out_of_stock:
        console.print(f"[red]{summary.out_of_stock} item(s) out of stock[/red]")
    if summary.low_stock:
        console.print(f"[yellow]{summary.low_stock} item(s) at or below minimum stock[/yellow]")
    if summary.expired:
        console.print(f"[red]{summary.expired} item(s) expired[/red]")
    if summary.expiring:
        console.print(f"[yellow]{summary.expiring} item(s) expiring within a week[/yellow]")


def stock_command(csv_file: str, as_of: str | None = None, low_only: bool = False) -> None:
    """Show stock levels, expiry and value for an inventory CSV."""
    csv_path = Path(csv_file).expanduser()
    now = resolve_as_of(as_of)

    try:
        currency = get_currency()
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config: {e}[/red]", style="bold")
        sys.exit(1)

    try:
        items, skipped = read_inventory(csv_path)
    except FileNotFoundError:
        console.print(f"[red]File not found: {csv_path}[/red]", style="bold")
        sys.exit(1)
    except (OSError, csv.Error) as e:
        console.print(f"[red]Could not read {csv_path}: {e}[/red]", style="bold")
        sys.exit(1)

    if not items:
        console.print("[yellow]No inventory items found[/yellow]")
        return

    shown = [item for item in items if is_low_stock(item.quantity, item.min_stock)] if low_only else items
    if shown:
        render_inventory(shown, now, currency)
    else:
        console.print("[green]No items are low on stock[/green]")

    render_summary(summarize_inventory(items, now), currency)

    if skipped:
        console.print(f"[dim]Skipped {skipped} invalid row(s)[/dim]")


def expiry_command(expiry_date: str, as_of: str | None = None) -> None:
    """Show the expiry bucket for a single date."""
    now = resolve_as_of(as_of)

    try:
        parsed = parse_expiry_date(expiry_date)
    except ValueError as e:
        console.print(f"[red]Invalid date: {e}[/red]", style="bold")
        sys.exit(1)

    status = get_expiry_status(parsed, now)
    if status is None or parsed is None:
        console.print("[dim]No expiry date tracked[/dim]")
        return

    days = days_until(parsed, now)
    console.print(f"{EXPIRY_STYLES[status]}: {days} day(s) left")
