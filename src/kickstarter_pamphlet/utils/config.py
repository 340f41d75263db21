"""Load YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "api": {
        "base_url": "https://www.kickstarter.com",
        "rate_limit_rps": 1.0,
        "timeout": 30,
        "max_retries": 3,
    },
    "logging": {
        "level": "INFO",
        "log_dir": "logs",
        "log_file": "pamphlet.log",
    },
}


def load_config(path: str | Path = "configs/pamphlet.yaml") -> dict[str, Any]:
    """Load configuration from a YAML file, filling in defaults per section.

    Args:
        path: Path to the config file.

    Returns:
        Parsed config dict.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        loaded = yaml.safe_load(f) or {}

    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    for section, values in loaded.items():
        if isinstance(values, dict) and section in config:
            config[section].update(values)
        else:
            config[section] = values
    return config
