from __future__ import annotations

import traceback
from typing import Optional, TextIO

from loguru import logger

from relnotes import config as _config
from relnotes.config import MODE_LOCAL, MODE_RELEASE, MODE_TAGS, Settings
from relnotes.core import classifier, commits, issues, parser, publisher, range_resolver
from relnotes.core.renderer import render
from relnotes.core.types import CommitLog, CommitRange
from relnotes.errors import ConfigError
from relnotes.infrastructure.git import GitRepo
from relnotes.infrastructure.github import GitHubClient
from relnotes.infrastructure.linear import LinearClient
from relnotes.utils.actions import set_failed


def build_github(settings: Settings) -> Optional[GitHubClient]:
    if not settings.needs_github:
        return None
    return GitHubClient(
        token=settings.token, repository=settings.repository, api_url=settings.api_url
    )


def _require(github: Optional[GitHubClient]) -> GitHubClient:
    if github is None:
        raise ConfigError("A GitHub client is required for this mode")
    return github


def resolve_range(
    settings: Settings, github: Optional[GitHubClient], git: GitRepo
) -> CommitRange:
    if settings.mode == MODE_RELEASE:
        return range_resolver.resolve_release_range(
            _require(github), settings.ref, settings.tag_prefix, settings.max_concurrency
        )
    if settings.mode == MODE_TAGS:
        return range_resolver.resolve_tag_range(_require(github), settings.tag_prefix)
    if settings.mode == MODE_LOCAL:
        return range_resolver.resolve_local_range(git, settings.tag_prefix)
    raise ConfigError(f"Unknown mode '{settings.mode}'")


def fetch_commits(
    settings: Settings,
    commit_range: CommitRange,
    github: Optional[GitHubClient],
    git: GitRepo,
) -> CommitLog:
    if settings.mode == MODE_LOCAL:
        return commits.fetch_local_commits(
            git,
            commit_range.from_ref,
            commit_range.to_ref,
            repository=settings.repository or None,
            server_url=settings.server_url,
            from_label=commit_range.previous_tag or None,
            to_label=commit_range.tag or None,
        )
    return commits.fetch_remote_commits(
        _require(github), commit_range.from_ref, commit_range.to_ref
    )


def generate(
    settings: Settings,
    *,
    github: Optional[GitHubClient] = None,
    git: Optional[GitRepo] = None,
) -> tuple[str, CommitRange, CommitLog]:
    """Resolve the range, fetch and classify commits, and render the changelog body."""
    git = git or GitRepo()
    commit_range = resolve_range(settings, github, git)
    logger.debug(
        f"Generate changelog from commit range: {commit_range.from_ref}...{commit_range.to_ref}"
    )

    log = fetch_commits(settings, commit_range, github, git)
    logger.debug(f"Fetched {len(log)} commit messages")

    parsed = parser.parse_all(log.messages)
    entries = classifier.collect(parsed, settings.scope, settings.dependent_scopes)
    body = render(
        settings.application_name,
        commit_range.version,
        log.compare_url,
        entries,
        deploy_url=settings.deploy_url,
        today=settings.release_date,
    )
    logger.debug(body)
    return body, commit_range, log


def execute(
    settings: Settings,
    *,
    github: Optional[GitHubClient] = None,
    git: Optional[GitRepo] = None,
    linear: Optional[LinearClient] = None,
    stream: Optional[TextIO] = None,
) -> Optional[str]:
    """
    Run the whole pipeline. Returns the published body, or ``None`` when the run is skipped.

    Errors propagate; ``run`` turns them into a failed status.
    """
    if settings.mode == MODE_RELEASE and not range_resolver.should_run(
        settings.ref, settings.tag_prefix
    ):
        return None

    github = github or build_github(settings)
    body, commit_range, log = generate(settings, github=github, git=git)

    publisher.publish(
        settings.target,
        body,
        commit_range,
        application_name=settings.application_name,
        github=github,
        stream=stream,
    )
    publisher.write_artifacts(body, settings.output or None)

    if settings.linear_api_key:
        linear = linear or LinearClient(
            api_key=settings.linear_api_key, url=settings.linear_api_url
        )
        updated = issues.mark_issues_as_done(
            _require(github), linear, log.shas, settings.max_concurrency
        )
        logger.info(f"Marked {len(updated)} Linear issue(s) as done.")
    return body


def run(settings: Settings, **kwargs) -> int:
    """Top-level handler: every failure is logged and reported as the run's failure status."""
    try:
        execute(settings, **kwargs)
    except Exception as exc:
        logger.error(f"Changelog generation failed: {exc}")
        logger.debug(f"Traceback:\n{traceback.format_exc()}")
        if _config.IN_GITHUB_ACTIONS:
            set_failed(str(exc))
        return 1
    return 0
