"""Route octarchive's loggers through rich on stderr."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from ..core.types import Verbosity


def setup_logging(verbosity: Verbosity, console: Console) -> logging.Logger:
    logger = logging.getLogger("octarchive")
    logger.setLevel(verbosity.level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(console=console, show_path=False, rich_tracebacks=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
