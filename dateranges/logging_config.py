"""
Console logging setup for the command line front end.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int | str = logging.WARNING, console: Console | None = None) -> None:
    """Route log records through rich, showing module paths and line numbers."""
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=True,
        rich_tracebacks=True,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    root_logger.addHandler(handler)
