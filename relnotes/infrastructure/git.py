from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from relnotes.errors import GitCommandError


class GitRepo:
    """Runs ``git`` in a working tree and turns non-zero exits into GitCommandError."""

    def __init__(self, cwd: Optional[Path | str] = None, executable: str = "git") -> None:
        self.cwd = Path(cwd) if cwd else None
        self.executable = executable

    def run(self, *args: str) -> str:
        cmd: List[str] = [self.executable, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise GitCommandError(cmd, 127, str(exc)) from exc
        if proc.returncode != 0:
            raise GitCommandError(cmd, proc.returncode, proc.stderr)
        return proc.stdout

    def tags(self, pattern: str = "*", sort: str = "-v:refname") -> List[str]:
        out = self.run("tag", "--list", pattern, f"--sort={sort}")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def rev(self, ref: str) -> str:
        return self.run("rev-list", "-n", "1", ref).strip()

    def log(self, log_range: str, pretty: str, extra: Sequence[str] = ()) -> str:
        """Return raw git log output for the given range, oldest first."""
        return self.run("log", "--reverse", f"--format={pretty}", *extra, log_range)

    def remote_url(self, name: str = "origin") -> Optional[str]:
        try:
            return self.run("remote", "get-url", name).strip() or None
        except GitCommandError:
            return None
