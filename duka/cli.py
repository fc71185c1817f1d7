"""CLI entry point for duka."""

import typer

from duka.commands.admin import config_command, init_command
from duka.commands.inventory import expiry_command, stock_command
from duka.commands.sale import change_command, price_command, sale_command

app = typer.Typer(
    name="duka",
    help="Duka - till and stock calculations for a small shop",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Duka - till and stock calculations for a small shop."""
    pass


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize duka configuration."""
    init_command(force)


@app.command(name="config")
def config() -> None:
    """Show your effective configuration."""
    config_command()


@app.command()
def price(
    base_price: float,
) -> None:
    """Show VAT and the VAT-inclusive price for a base price."""
    price_command(base_price)


@app.command()
def sale(
    csv_file: str,
    paid: float = typer.Option(None, "--paid", "-p", help="Amount paid by the customer"),
) -> None:
    """Total a sale from a CSV file (name, price, quantity)."""
    sale_command(csv_file, paid)


@app.command()
def change(
    amount_paid: float,
    total: float,
) -> None:
    """Work out the change due for a payment."""
    change_command(amount_paid, total)


@app.command()
def stock(
    csv_file: str,
    as_of: str = typer.Option(None, "--as-of", help="Reference date for expiry checks (default: now)"),
    low_only: bool = typer.Option(False, "--low-only", "-l", help="Only list items at or below minimum stock"),
) -> None:
    """Show stock levels, expiry and value from an inventory CSV."""
    stock_command(csv_file, as_of, low_only)


@app.command()
def expiry(
    expiry_date: str,
    as_of: str = typer.Option(None, "--as-of", help="Reference date (default: now)"),
) -> None:
    """Check the expiry status of a date."""
    expiry_command(expiry_date, as_of)


if __name__ == "__main__":
    app()
