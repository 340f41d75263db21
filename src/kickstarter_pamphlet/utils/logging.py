"""Logging setup with Rich console output and optional file logging."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[str] = "logs",
    log_file: str = "pamphlet.log",
) -> logging.Logger:
    """Configure logging with a Rich console handler and, if ``log_dir`` is set, a file.

    Args:
        level: Log level string.
        log_dir: Directory for log files, or None for console only.
        log_file: Log filename.

    Returns:
        Root logger.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = RichHandler(
        level=getattr(logging, level.upper(), logging.INFO),
        rich_tracebacks=True,
        show_time=True,
        show_path=False,
    )
    console.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(console)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path / log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root.addHandler(file_handler)

    return root
