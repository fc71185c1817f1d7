"""Admin commands for initialising and showing configuration."""

import sys
import tomllib

from rich.console import Console
from rich.table import Table

from duka.config import create_default_config, get_config_path, load_settings

console = Console()


def init_command(force: bool = False) -> None:
    """Initialize duka configuration."""
    config_path = get_config_path()

    # Guard: refuse to overwrite without force flag
    if not force and config_path.exists():
        console.print("[red]Initialization failed:[/red]", style="bold")
        console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'duka init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Config file created (permissions: 600)")
    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Config: {config_path}[/dim]")


def config_command() -> None:
    """Show the effective configuration."""
    config_path = get_config_path()

    try:
        settings = load_settings(config_path)
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config: {e}[/red]", style="bold")
        sys.exit(1)

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    for key, value in settings.items():
        table.add_row(key, str(value))

    console.print(table)

    if config_path.exists():
        console.print(f"[dim]Config: {config_path}[/dim]")
    else:
        console.print("[dim]No config file found, using defaults. Run 'duka init' to create one.[/dim]")
