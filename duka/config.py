"""Configuration file management for duka.

Settings live in a single TOML file under the XDG config directory. Every
function takes an optional explicit path so tests and scripts can point at
a file of their own.
"""

import math
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from duka.domain.pricing import VAT_RATE

CONFIG_DIR_NAME = "duka"
CONFIG_FILE_NAME = "config.toml"

DEFAULT_SETTINGS: dict[str, Any] = {
    "vat_rate": VAT_RATE,
    "currency": "KSH",
}


def get_xdg_config_home() -> Path:
    """Return $XDG_CONFIG_HOME, or ~/.config when it is unset or empty."""
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")


def get_config_path() -> Path:
    """Return the default location of the duka config file."""
    return get_xdg_config_home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def resolve_config_path(config_path: Path | None) -> Path:
    """Use the given path, falling back to the default location."""
    return config_path if config_path is not None else get_config_path()


def create_default_config(config_path: Path | None = None) -> None:
    """Write the default settings, replacing any existing file."""
    save_config(dict(DEFAULT_SETTINGS), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Read the raw settings stored in the config file.

    Args:
        config_path: Config file to read. Defaults to get_config_path().

    Returns:
        Settings exactly as stored, without defaults filled in.

    Raises:
        FileNotFoundError: If there is no config file yet.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with resolve_config_path(config_path).open("rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Write settings to the config file, readable by the owner only.

    Missing parent directories are created.
    """
    path = resolve_config_path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(config, f)

    path.chmod(0o600)


def load_settings(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration merged over the defaults.

    A missing config file is not an error; the defaults apply.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Effective settings dictionary.
    """
    settings = dict(DEFAULT_SETTINGS)
    try:
        settings.update(load_config(config_path))
    except FileNotFoundError:
        pass
    return settings


def get_vat_rate(config_path: Path | None = None) -> float:
    """Get the effective VAT rate.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        VAT rate as a fraction (0.16 for 16%).

    Raises:
        ValueError: If the configured rate is not a finite, non-negative number.
    """
    rate = load_settings(config_path)["vat_rate"]
    if isinstance(rate, bool) or not isinstance(rate, int | float):
        raise ValueError(f"vat_rate must be a number, got {rate!r}")
    if not math.isfinite(rate):
        raise ValueError(f"vat_rate must be finite, got {rate}")
    if rate < 0:
        raise ValueError(f"vat_rate must not be negative, got {rate}")
    return float(rate)


def get_currency(config_path: Path | None = None) -> str:
    """Get the currency label used when displaying amounts."""
    return str(load_settings(config_path)["currency"])
