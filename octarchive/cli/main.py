"""CLI entrypoint for the octarchive console script."""

from ..commands.archive.cli import app


def main() -> None:
    app(prog_name="octarchive")
