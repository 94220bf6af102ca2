"""Small types and Enums used by octarchive."""

import logging
from enum import Enum


class Verbosity(str, Enum):
    """Log levels accepted by --verbosity."""

    debug = "debug"
    info = "info"
    warn = "warn"
    error = "error"

    @property
    def level(self) -> int:
        return {
            Verbosity.debug: logging.DEBUG,
            Verbosity.info: logging.INFO,
            Verbosity.warn: logging.WARNING,
            Verbosity.error: logging.ERROR,
        }[self]


class JobState(str, Enum):
    """Lifecycle of a single clone job."""

    pending = "pending"
    preparing = "preparing"
    cloning = "cloning"
    completed = "completed"
    skipped_empty = "skipped_empty"
    failed = "failed"
