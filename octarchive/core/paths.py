"""Local layout: <base>/<forge-host>/<timestamp>/<owner>/<repo>."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from urllib.parse import urlparse

from .models import CloneJob, ForgeRepository


def forge_host(api: str) -> str:
    host = urlparse(api).hostname
    if not host:
        raise ValueError(f"cannot determine forge host from API URL {api!r}")
    return host


def split_full_name(full_name: str) -> tuple[str, str]:
    """'owner/name' -> ('owner', 'name'); splits on the rightmost '/'."""
    owner, _, name = full_name.rpartition("/")
    for segment in (*owner.split("/"), name):
        if segment in ("", ".", ".."):
            raise ValueError(f"invalid repository full name {full_name!r}")
    return owner, name


def session_root(base: Path | str, host: str, timestamp: str) -> Path:
    return Path(base) / host / timestamp


def destination_path(base: Path | str, host: str, timestamp: str, owner: str, name: str) -> Path:
    return session_root(base, host, timestamp) / owner / name


def plan_jobs(
    repositories: Iterable[ForgeRepository],
    base: Path | str,
    host: str,
    timestamp: str,
) -> list[CloneJob]:
    root = session_root(base, host, timestamp).resolve()
    jobs: list[CloneJob] = []
    for repo in repositories:
        owner, name = split_full_name(repo.full_name)
        destination = destination_path(base, host, timestamp, owner, name)
        if root not in destination.resolve().parents:
            raise ValueError(f"repository {repo.full_name!r} resolves outside {root}")
        jobs.append(CloneJob(full_name=repo.full_name, source=repo.clone_url, destination=destination))
    return jobs
