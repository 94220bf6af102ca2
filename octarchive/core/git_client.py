"""Small helpers for running Git commands to clone repositories."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from .constants import EMPTY_REPOSITORY_MARKERS
from .errors import CloneError, EmptyRepositoryError
from .forge_client import ForgeClient

log = logging.getLogger(__name__)


class GitClient:
    def __init__(self, git: str = "git") -> None:
        self.git = git

    # ---------- process helpers ----------
    @staticmethod
    def _run_out(cmd: list[str], cwd: str | None = None) -> tuple[bool, str]:
        env = dict(os.environ, GIT_TERMINAL_PROMPT="0", LC_ALL="C", LANGUAGE="C")
        try:
            proc = subprocess.run(
                cmd,
                cwd=cwd,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError as e:
            return False, f"{e}"
        return proc.returncode == 0, proc.stdout.decode("utf-8", "ignore").strip()

    # ---------- clone ----------
    def clone(
        self,
        source: str,
        destination: Path,
        *,
        username: str,
        token: str | None = None,
        shallow: bool = False,
    ) -> None:
        """Clone ``source`` into the existing, empty ``destination`` directory.

        Raises EmptyRepositoryError when the remote has no history and
        CloneError for anything else git complains about.
        """
        url = ForgeClient.inject_credentials(source, username, token) if token else source

        # disable credential helpers so a bad token fails instead of prompting
        cmd = [self.git, "-c", "credential.helper=", "clone", "--progress"]
        if shallow:
            cmd += ["--depth", "1", "--single-branch"]
        cmd += [url, str(destination)]

        ok, out = self._run_out(cmd)
        if token:
            out = out.replace(token, "***")
        if out:
            log.debug("git clone output clone_url=%s\n%s", source, out)

        if any(marker in out for marker in EMPTY_REPOSITORY_MARKERS):
            raise EmptyRepositoryError(source, destination, "remote repository is empty")
        if not ok:
            raise CloneError(source, destination, out.splitlines()[-1] if out else "git clone failed")
