"""Logging helpers for TestPlan."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route the package's log records through rich."""
    logger = logging.getLogger("testplan")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return
    handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    logger.addHandler(handler)
