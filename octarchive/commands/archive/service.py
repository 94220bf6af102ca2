"""Services for the archive command."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from ...core.enumerator import Enumerator
from ...core.errors import ConfigurationError
from ...core.forge_client import ForgeClient
from ...core.git_client import GitClient
from ...core.models import CloneJob
from ...core.paths import forge_host, plan_jobs, session_root
from ...core.scheduler import Cloner, CloneScheduler, ScheduleReport
from ...core.types import JobState
from ...services.session import clear_session_root

log = logging.getLogger(__name__)


def archive(
    *,
    api: str,
    token: str,
    dst: Path,
    timestamp: str,
    include_orgs: bool = False,
    fresh: bool = False,
    concurrency: int = 1,
    shallow: bool = False,
    show_progress: bool = True,
    console: Console | None = None,
    client: ForgeClient | None = None,
    cloner: Cloner | None = None,
    cancel_event: threading.Event | None = None,
) -> ScheduleReport:
    """Enumerate the principal's repositories, then clone all of them into the session root."""
    if not token or not token.strip():
        raise ConfigurationError("missing token")
    if concurrency < 1:
        raise ConfigurationError(f"concurrency must be at least 1, got {concurrency}")

    cancel_event = cancel_event or threading.Event()
    host = forge_host(api)
    client = client or ForgeClient(api, token, cancel_event=cancel_event)
    cloner = cloner or GitClient()

    inventory = Enumerator(client).enumerate(include_orgs=include_orgs)
    jobs = plan_jobs(inventory.repositories, dst, host, timestamp)
    root = session_root(dst, host, timestamp)
    log.info("Planned clone jobs count=%d path=%s", len(jobs), root)

    if fresh:
        clear_session_root(root)

    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("repo"),
        TimeElapsedColumn(),
        console=console,
        disable=not show_progress,
    ) as progress:
        task = progress.add_task("Cloning", total=len(jobs))

        def advance(job: CloneJob, state: JobState) -> None:
            progress.update(task, advance=1)

        scheduler = CloneScheduler(
            cloner,
            concurrency=concurrency,
            username=inventory.principal.login,
            token=token,
            shallow=shallow,
            cancel_event=cancel_event,
            on_advance=advance,
        )
        return scheduler.run(jobs)
