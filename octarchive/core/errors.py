"""Exceptions raised by octarchive."""

from __future__ import annotations

from pathlib import Path


class OctarchiveError(RuntimeError):
    pass


class ConfigurationError(OctarchiveError):
    pass


class SessionError(OctarchiveError):
    pass


class TransportError(OctarchiveError):
    """The forge could not be reached or sent back something unusable."""


class APIError(OctarchiveError):
    """The forge answered with a status other than 200."""

    def __init__(self, status: int, reason: str, url: str) -> None:
        self.status = status
        self.reason = reason
        self.url = url
        super().__init__(f"{status} {reason} ({url})")


class CloneError(OctarchiveError):
    def __init__(self, source: str, destination: Path | str, message: str) -> None:
        self.source = source
        self.destination = Path(destination)
        self.message = message
        super().__init__(f"{source} -> {destination}: {message}")


class EmptyRepositoryError(CloneError):
    """The remote has no history; callers treat this as a skip."""
