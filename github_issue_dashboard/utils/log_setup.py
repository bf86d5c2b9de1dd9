"""Logging setup shared by the CLI and the HTTP service."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> None:
    """Configure root logging with a rich console handler.

    Calling this more than once does not stack handlers; the level is
    updated and a file handler is added only if one for the same path is
    not already installed.

    Args:
        level: Logging level name or number
        log_file: Optional path of a log file to append to
    """
    root = logging.getLogger()
    root.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in root.handlers):
        console_handler = RichHandler(rich_tracebacks=True, show_path=False)
        console_handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))
        root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        if not any(
            isinstance(h, logging.FileHandler)
            and getattr(h, "baseFilename", "") == str(log_path.resolve())
            for h in root.handlers
        ):
            fh = logging.FileHandler(log_path)
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(fh)
