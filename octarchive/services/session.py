"""Session directory lifecycle."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..core.errors import SessionError

log = logging.getLogger(__name__)


def clear_session_root(root: Path) -> bool:
    """Remove the whole session root; returns False when there was nothing to remove."""
    if not root.exists():
        return False
    log.info("Clearing session directory path=%s", root)
    try:
        shutil.rmtree(root)
    except OSError as e:
        raise SessionError(f"cannot clear session directory {root}: {e}") from e
    return True
