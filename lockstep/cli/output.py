"""Shared consoles and logging setup for CLI commands.

Report lines go to stdout; logs and fatal errors go to stderr so the report
can be piped on its own.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)

_LOGGER_NAME = "lockstep"


def configure_logging(level: str = "WARNING", *, verbose: bool = False) -> logging.Logger:
    """Attach a single Rich handler on stderr to the ``lockstep`` logger."""
    resolved = logging.DEBUG if verbose else logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(resolved)
    logger.propagate = False

    # Invoking the CLI repeatedly in one process must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(console=err_console, show_path=False, show_time=False)
    handler.setLevel(resolved)
    logger.addHandler(handler)
    return logger
