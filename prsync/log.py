"""Logging setup: stdlib logging rendered through rich."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


def get_log_level(verbose: bool = False) -> str:
    """--verbose wins, then LOG_LEVEL, then INFO."""
    if verbose:
        return "DEBUG"
    return os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(verbose: bool = False) -> None:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=get_log_level(verbose),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO; keep it for --verbose only.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)
