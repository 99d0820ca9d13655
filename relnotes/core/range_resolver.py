from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from loguru import logger
from packaging import version as _version

from relnotes.config import PAGE_SIZE
from relnotes.core.types import CommitRange
from relnotes.errors import ReleaseNotFoundError, TagNotFoundError
from relnotes.infrastructure.git import GitRepo
from relnotes.infrastructure.github import GitHubClient
from relnotes.utils.concurrency import fan_out, run_both

TAG_REF_PREFIX = "refs/tags/"


def tag_from_ref(ref: str) -> str:
    return ref.replace(TAG_REF_PREFIX, "", 1) if ref.startswith(TAG_REF_PREFIX) else ref


def should_run(ref: str, tag_prefix: str) -> bool:
    """True when the workflow ref is a tag carrying the configured prefix."""
    if ref.startswith(f"{TAG_REF_PREFIX}{tag_prefix}"):
        return True
    logger.debug(
        f"Git tag name ({tag_from_ref(ref)}) isn't matched with tag_prefix config ({tag_prefix})"
    )
    logger.debug("Skipping action...")
    return False


def strip_prefix(tag: str, tag_prefix: str) -> str:
    return tag[len(tag_prefix):] if tag_prefix and tag.startswith(tag_prefix) else tag


def _normalize(ver: str) -> str:
    v = ver.strip()
    if v.lower().startswith("v"):
        v = v[1:]
    return v


def sort_tags_newest_first(tags: Sequence[str], tag_prefix: str) -> List[str]:
    """
    Order tags newest first by version number.

    Falls back to the given order when any suffix is not a parseable version.
    """
    try:
        return sorted(
            tags,
            key=lambda t: _version.parse(_normalize(strip_prefix(t, tag_prefix))),
            reverse=True,
        )
    except _version.InvalidVersion:
        logger.debug("Tag suffixes are not all versions; keeping API order")
        return list(tags)


def find_previous_release_tag(
    github: GitHubClient, current_tag: str, tag_prefix: str
) -> Optional[str]:
    page = 1
    while True:
        data = github.list_releases(page=page, per_page=PAGE_SIZE) or []
        for release in data:
            tag_name = release.get("tag_name") or ""
            if tag_name != current_tag and tag_name.startswith(tag_prefix):
                return tag_name
        page += 1
        if len(data) < PAGE_SIZE:
            return None


def resolve_release_range(
    github: GitHubClient, ref: str, tag_prefix: str, max_workers: Optional[int] = None
) -> CommitRange:
    """
    Locate the release being published and its predecessor.

    Parameters:
        github (GitHubClient): client bound to the repository.
        ref (str): workflow ref, e.g. ``refs/tags/web-v1.2.0``.
        tag_prefix (str): prefix shared by this application's release tags.

    Returns:
        CommitRange: commit SHAs of the previous and current tags, the current
        release id and the version (current tag without the prefix).

    Raises:
        ReleaseNotFoundError: when no earlier release carries the prefix.
    """
    current_tag = tag_from_ref(ref)
    previous_tag = find_previous_release_tag(github, current_tag, tag_prefix)
    if not previous_tag:
        raise ReleaseNotFoundError(tag_prefix, current_tag)

    logger.debug(f"Current Release Tag: {current_tag}")
    logger.debug(f"Found Previous Release Tag: {previous_tag}")

    shas, release = run_both(
        lambda: fan_out(github.resolve_tag_sha, [previous_tag, current_tag], max_workers),
        lambda: github.get_release_by_tag(current_tag),
        max_workers,
    )
    return CommitRange(
        from_ref=shas[0],
        to_ref=shas[1],
        tag=current_tag,
        previous_tag=previous_tag,
        version=strip_prefix(current_tag, tag_prefix),
        release_id=release["id"],
    )


def list_remote_tags(github: GitHubClient, tag_prefix: str) -> List[Dict[str, str]]:
    tags: List[Dict[str, str]] = []
    page = 1
    while True:
        data = github.list_tags(page=page, per_page=PAGE_SIZE) or []
        for tag in data:
            name = tag.get("name") or ""
            if name.startswith(tag_prefix):
                tags.append({"name": name, "sha": (tag.get("commit") or {}).get("sha", "")})
        page += 1
        if len(data) < PAGE_SIZE:
            return tags


def resolve_tag_range(github: GitHubClient, tag_prefix: str) -> CommitRange:
    """Compare the two most recent remote tags that carry the prefix."""
    tags = list_remote_tags(github, tag_prefix)
    by_name = {t["name"]: t["sha"] for t in tags}
    ordered = sort_tags_newest_first(list(by_name), tag_prefix)
    if len(ordered) < 2:
        raise TagNotFoundError(tag_prefix, ordered)
    current_tag, previous_tag = ordered[0], ordered[1]
    logger.debug(f"Current Tag: {current_tag}, Previous Tag: {previous_tag}")
    return CommitRange(
        from_ref=by_name[previous_tag],
        to_ref=by_name[current_tag],
        tag=current_tag,
        previous_tag=previous_tag,
        version=strip_prefix(current_tag, tag_prefix),
    )


def resolve_local_range(git: GitRepo, tag_prefix: str) -> CommitRange:
    """Compare the two most recent local tags (``git tag --sort=-v:refname``) that carry the prefix."""
    tags = [t for t in git.tags(f"{tag_prefix}*") if t.startswith(tag_prefix)]
    if len(tags) < 2:
        raise TagNotFoundError(tag_prefix, tags)
    current_tag, previous_tag = tags[0], tags[1]
    logger.debug(f"Current Tag: {current_tag}, Previous Tag: {previous_tag}")
    return CommitRange(
        from_ref=git.rev(previous_tag),
        to_ref=git.rev(current_tag),
        tag=current_tag,
        previous_tag=previous_tag,
        version=strip_prefix(current_tag, tag_prefix),
    )
