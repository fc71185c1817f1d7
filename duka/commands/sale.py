"""Till commands for pricing items, totalling sales and giving change."""

import csv
import math
import sys
import tomllib
from pathlib import Path

from rich.console import Console
from rich.table import Table

from duka.config import get_currency, get_vat_rate
from duka.domain.models import Money
from duka.domain.pricing import (
    SaleLine,
    SaleTotals,
    calculate_change,
    calculate_sale_totals,
    calculate_total_price,
    calculate_vat,
    format_money_display,
    parse_sale_row,
)

console = Console()


def load_pricing_settings() -> tuple[float, str]:
    """Load VAT rate and currency, exiting on a broken config."""
    try:
        return get_vat_rate(), get_currency()
    except (tomllib.TOMLDecodeError, ValueError) as e:
        console.print(f"[red]Invalid config: {e}[/red]", style="bold")
        sys.exit(1)


def require_finite(value: float, label: str) -> None:
    """Exit with an error unless value is a finite number."""
    if not math.isfinite(value):
        console.print(f"[red]{label} must be a finite number, got {value}[/red]", style="bold")
        sys.exit(1)


def read_sale_lines(csv_path: Path, vat_rate: float) -> tuple[list[SaleLine], int]:
    """Read cart lines from a CSV file.

    Args:
        csv_path: Path to CSV with name, price and quantity columns.
        vat_rate: VAT rate as a fraction.

    Returns:
        Tuple of (lines, skipped_row_count).
    """
    lines: list[SaleLine] = []
    skipped = 0

    with open(csv_path, encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            normalized = {k.strip().lower(): v for k, v in row.items() if k}
            line = parse_sale_row(normalized, vat_rate)
            if line is None:
                skipped += 1
                continue
            lines.append(line)

    return lines, skipped


def render_sale(lines: list[SaleLine], totals: SaleTotals, vat_rate: float, currency: str) -> None:
    """Render the cart and its totals."""
    table = Table(title="Current Sale")
    table.add_column("Item", style="white")
    table.add_column("Qty", justify="right")
    table.add_column("Base", justify="right")
    table.add_column("VAT", justify="right", style="dim")
    table.add_column("Unit Total", justify="right")

    for line in lines:
        table.add_row(
            line.name,
            str(line.quantity),
            format_money_display(round(line.base_price, 2), currency),
            format_money_display(round(line.vat_amount, 2), currency),
            format_money_display(line.total_price, currency),
        )

    console.print(table)
    console.print(f"  Subtotal: {format_money_display(round(totals.subtotal, 2), currency)}")
    console.print(f"  VAT ({vat_rate * 100:g}%): {format_money_display(round(totals.vat_total, 2), currency)}")
    console.print(f"  [bold]Total: {format_money_display(totals.total, currency)}[/bold]")

    if totals.amount_paid is not None:
        console.print(f"  Paid: {format_money_display(totals.amount_paid, currency)}")
        if totals.amount_paid < totals.total:
            short = totals.total - totals.amount_paid
            console.print(f"  [yellow]Payment short by {format_money_display(short, currency)}[/yellow]")
        console.print(f"  [green]Change: {format_money_display(totals.change, currency)}[/green]")


def price_command(base_price: float) -> None:
    """Show VAT and the VAT-inclusive price for a base price."""
    require_finite(base_price, "Base price")
    vat_rate, currency = load_pricing_settings()

    vat_amount = calculate_vat(base_price, vat_rate)
    total = calculate_total_price(base_price, vat_rate)

    console.print(f"  Base: {format_money_display(base_price, currency)}")
    console.print(f"  VAT ({vat_rate * 100:g}%): {format_money_display(round(vat_amount, 2), currency)}")
    console.print(f"  [bold]Total: {format_money_display(total, currency)}[/bold]")


def sale_command(csv_file: str, amount_paid: float | None = None) -> None:
    """Total a sale from a CSV cart file."""
    if amount_paid is not None:
        require_finite(amount_paid, "Amount paid")

    csv_path = Path(csv_file).expanduser()
    vat_rate, currency = load_pricing_settings()

    try:
        lines, skipped = read_sale_lines(csv_path, vat_rate)
    except FileNotFoundError:
        console.print(f"[red]File not found: {csv_path}[/red]", style="bold")
        sys.exit(1)
    except (OSError, csv.Error) as e:
        console.print(f"[red]Could not read {csv_path}: {e}[/red]", style="bold")
        sys.exit(1)

    if not lines:
        console.print("[yellow]No sale lines found[/yellow]")
        return

    paid = Money(amount_paid) if amount_paid is not None else None
    totals = calculate_sale_totals(lines, paid)
    render_sale(lines, totals, vat_rate, currency)

    if skipped:
        console.print(f"[dim]Skipped {skipped} row(s) without a valid price[/dim]")


def change_command(amount_paid: float, total: float) -> None:
    """Show change due for a payment."""
    require_finite(amount_paid, "Amount paid")
    require_finite(total, "Total")
    _, currency = load_pricing_settings()

    change = calculate_change(amount_paid, total)
    if amount_paid < total:
        console.print(f"[yellow]Payment short by {format_money_display(total - amount_paid, currency)}[/yellow]")
    console.print(f"[green]Change: {format_money_display(change, currency)}[/green]")
