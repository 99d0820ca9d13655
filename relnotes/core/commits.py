from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from loguru import logger

from relnotes.config import GITHUB_SERVER_URL, PAGE_SIZE
from relnotes.core.types import CommitLog
from relnotes.infrastructure.git import GitRepo
from relnotes.infrastructure.github import GitHubClient

# sha NUL full-message RS; messages may contain newlines, never NUL/RS.
LOG_FORMAT = "%H%x00%B%x1e"

_REMOTE_REPO_PATTERN = re.compile(r"github\.com[:/]([^/]+/[^/]+?)(?:\.git)?/?$")


def fetch_remote_commits(github: GitHubClient, from_sha: str, to_sha: str) -> CommitLog:
    """Page through the compare API until a page holds fewer than PAGE_SIZE commits."""
    commits: List[Dict[str, Any]] = []
    url = ""
    page = 1
    while True:
        data = github.compare(from_sha, to_sha, page=page, per_page=PAGE_SIZE) or {}
        batch = data.get("commits") or []
        commits.extend(batch)
        url = data.get("html_url") or url
        logger.debug(f"Compare page {page}: {len(batch)} commits")
        if len(batch) < PAGE_SIZE:
            break
        page += 1
    return CommitLog(
        compare_url=url,
        shas=[c.get("sha", "") for c in commits],
        messages=[(c.get("commit") or {}).get("message", "") for c in commits],
    )


def parse_log_output(raw_log: str) -> CommitLog:
    """Convert git log output produced with LOG_FORMAT into shas and messages."""
    log = CommitLog(compare_url="")
    for chunk in raw_log.split("\x1e"):
        chunk = chunk.strip("\n")
        if not chunk.strip():
            continue
        sha, sep, message = chunk.partition("\x00")
        if not sep:
            continue
        log.shas.append(sha.strip())
        log.messages.append(message.strip())
    return log


def repository_from_remote(remote_url: Optional[str]) -> Optional[str]:
    """Extract ``owner/name`` from a GitHub remote URL (SSH or HTTPS)."""
    if not remote_url:
        return None
    match = _REMOTE_REPO_PATTERN.search(remote_url.strip())
    return match.group(1) if match else None


def compare_url_for(
    from_ref: str, to_ref: str, repository: Optional[str], server_url: str = GITHUB_SERVER_URL
) -> str:
    if not repository:
        return ""
    return f"{server_url.rstrip('/')}/{repository}/compare/{from_ref}...{to_ref}"


def fetch_local_commits(
    git: GitRepo,
    from_ref: str,
    to_ref: str,
    *,
    repository: Optional[str] = None,
    server_url: str = GITHUB_SERVER_URL,
    from_label: Optional[str] = None,
    to_label: Optional[str] = None,
) -> CommitLog:
    """
    Read commit messages between two refs from the local repository.

    The compare URL uses the tag names (``from_label``/``to_label``) when given,
    and the repository falls back to the ``origin`` remote when it points at GitHub.
    """
    log = parse_log_output(git.log(f"{from_ref}..{to_ref}", LOG_FORMAT))
    repo = repository or repository_from_remote(git.remote_url())
    log.compare_url = compare_url_for(
        from_label or from_ref, to_label or to_ref, repo, server_url
    )
    return log
