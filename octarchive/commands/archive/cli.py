"""CLI for archiving every repository of the token's owner."""

import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from ...config.logging_setup import setup_logging
from ...config.settings import get_settings, resolve_api, resolve_token
from ...core.constants import DEFAULT_API
from ...core.errors import OctarchiveError
from ...core.types import Verbosity
from .service import archive

app = typer.Typer(add_completion=False)


@app.command(name="archive")
def archive_command(
    api: str = typer.Option(DEFAULT_API, help="GitHub/Forgejo API endpoint (or FORGE_API)"),
    token: str | None = typer.Option(None, help="GitHub/Forgejo access token (or FORGE_TOKEN)"),
    orgs: bool = typer.Option(False, "--orgs", help="Also clone repos of all orgs the user is part of"),
    dst: Path | None = typer.Option(None, help="Base directory to clone repos into"),
    timestamp: str | None = typer.Option(None, help="Directory name for this clone session (default: now)"),
    fresh: bool = typer.Option(False, "--fresh", help="Clear the session directory before cloning"),
    concurrency: int = typer.Option(os.cpu_count() or 1, min=1, help="Maximum repositories cloned at once"),
    shallow: bool = typer.Option(False, "--shallow", help="Shallow, single-branch clones (depth 1)"),
    verbosity: Verbosity = typer.Option(Verbosity.info, case_sensitive=False),  # noqa: B008
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Same as --verbosity debug"),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show a progress bar"),
):
    """Clone all repositories of the token's owner into <dst>/<host>/<timestamp>/<owner>/<repo>."""
    console = Console(stderr=True)
    setup_logging(Verbosity.debug if verbose else verbosity, console)

    s = get_settings()
    _api = resolve_api(s, api)
    _token = resolve_token(s, token)
    if not _token or not _token.strip():
        console.print("[red]Missing token: pass --token or set FORGE_TOKEN.[/]")
        raise typer.Exit(code=1)

    start = time.time()
    try:
        report = archive(
            api=_api,
            token=_token,
            dst=dst or Path(s.default_dst),
            timestamp=timestamp or str(int(time.time())),
            include_orgs=orgs,
            fresh=fresh,
            concurrency=concurrency,
            shallow=shallow,
            show_progress=progress,
            console=console,
        )
    except (OctarchiveError, ValueError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1)

    secs = time.time() - start
    console.print(
        f"Done. {len(report.completed)} cloned, {len(report.skipped)} empty skipped in {secs:.1f}s.",
        highlight=False,
    )
