"""Helpers for the GitHub Actions runner: annotations, outputs and step summaries."""

from __future__ import annotations

import os
import sys
import uuid
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str, stream: Optional[TextIO] = None) -> None:
    """Emit an ``::error::`` workflow command so the step is annotated with the failure."""
    out = stream or sys.stdout
    out.write(f"::error::{_escape_data(message)}\n")
    out.flush()


def set_output(name: str, value: str) -> bool:
    """Append a (possibly multiline) output to ``$GITHUB_OUTPUT``.

    Returns False when not running under the Actions runner.
    """
    path_value = os.environ.get("GITHUB_OUTPUT")
    if not path_value:
        return False
    delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
    with Path(path_value).open("a", encoding="utf-8") as fh:
        fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    logger.debug(f"Action output '{name}' written to {path_value}")
    return True


def write_step_summary(markdown: str) -> bool:
    summary_path_value = os.environ.get("GITHUB_STEP_SUMMARY")
    if not summary_path_value:
        return False
    try:
        with Path(summary_path_value).open("a", encoding="utf-8") as fh:
            fh.write(markdown.rstrip() + "\n")
        logger.info(f"Step summary written to {summary_path_value}.")
        return True
    except OSError as exc:
        logger.warning(f"Failed to write step summary to {summary_path_value}: {exc}")
        return False
