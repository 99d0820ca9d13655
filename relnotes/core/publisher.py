from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

from relnotes.config import TARGET_CREATE_RELEASE, TARGET_PRINT, TARGET_UPDATE_RELEASE
from relnotes.core.types import CommitRange
from relnotes.errors import ConfigError
from relnotes.infrastructure.github import GitHubClient
from relnotes.utils.actions import set_output, write_step_summary


def publish(
    target: str,
    body: str,
    commit_range: CommitRange,
    *,
    application_name: str,
    github: Optional[GitHubClient] = None,
    stream: Optional[TextIO] = None,
) -> Optional[dict]:
    """
    Send the rendered changelog to its destination.

    Returns the GitHub release payload for release targets, ``None`` for ``print``.
    """
    if target == TARGET_PRINT:
        out = stream or sys.stdout
        out.write(body + "\n")
        out.flush()
        return None

    if github is None:
        raise ConfigError(f"Target '{target}' needs a GitHub client")

    if target == TARGET_UPDATE_RELEASE:
        if commit_range.release_id is None:
            raise ConfigError("No release id to update")
        release = github.update_release(commit_range.release_id, body)
        logger.info(f"Changelog posted to release body ({commit_range.tag}).")
        return release

    if target == TARGET_CREATE_RELEASE:
        release = github.create_release(
            commit_range.tag, f"{application_name} {commit_range.version}", body
        )
        logger.info(f"Release created for {commit_range.tag}.")
        return release

    raise ConfigError(f"Unknown target '{target}'")


def write_artifacts(body: str, output: Optional[str] = None) -> None:
    """Write the body to ``output`` (if set), the step summary and the ``changelog`` action output."""
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body + "\n", encoding="utf-8")
        logger.info(f"Changelog written to {path}.")
    write_step_summary(body)
    set_output("changelog", body)
