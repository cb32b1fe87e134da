"""Configuration loaded from ``gridcalc.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "gridcalc.yaml"

DEFAULT_CONFIG = {
    "default_rows": 10,  # grid size for an empty file
    "default_columns": 10,
    "delimiter": ",",
    "log_dir": None,  # no event log unless set
    "logging_fsync": False,
}


def load_config(base_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from ``gridcalc.yaml``, with defaults.

    Args:
        base_dir: Directory holding the config file (default: cwd).

    Returns:
        Merged configuration dict.

    Raises:
        ValueError: If a grid dimension is not positive or the delimiter
            is not a single character.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = (base_dir or Path.cwd()) / CONFIG_FILENAME
    if config_path.exists():
        user_config = yaml.safe_load(config_path.read_text()) or {}
        config.update(user_config)

    for key in ("default_rows", "default_columns"):
        config[key] = int(config[key])
        if config[key] < 1:
            raise ValueError(f"{key} must be positive, got {config[key]}")
    if not isinstance(config["delimiter"], str) or len(config["delimiter"]) != 1:
        raise ValueError(f"delimiter must be a single character, got {config['delimiter']!r}")

    return config


def resolve_log_dir(config: dict[str, Any], base_dir: Path | None = None) -> Path | None:
    """Return the configured ``log_dir`` (relative to *base_dir*), or None."""
    log_dir = config.get("log_dir")
    if not log_dir:
        return None
    path = Path(log_dir)
    if not path.is_absolute():
        path = (base_dir or Path.cwd()) / path
    return path


def configure_logging(config: dict[str, Any], base_dir: Path | None = None) -> None:
    """Point the event log at ``log_dir`` when one is configured."""
    path = resolve_log_dir(config, base_dir)
    if path is None:
        return
    from gridcalc.logging import set_log_dir

    set_log_dir(path, fsync=bool(config.get("logging_fsync", False)))
