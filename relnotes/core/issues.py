from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from relnotes.errors import WorkflowStateError
from relnotes.infrastructure.github import GitHubClient
from relnotes.infrastructure.linear import LinearClient, LinearIssue, WorkflowState
from relnotes.utils.concurrency import fan_out, run_both

RESOLVES_PATTERN = re.compile(r"Resolves\s([A-Z0-9]+-[0-9]+)")
DONE_STATE_NAME = "Done"


def extract_issue_ids(bodies: Iterable[Optional[str]]) -> List[str]:
    """First ``Resolves ABC-123`` reference of every PR body, deduplicated in first-seen order."""
    seen: Dict[str, None] = {}
    for body in bodies:
        if not body:
            continue
        match = RESOLVES_PATTERN.search(body)
        if match:
            seen.setdefault(match.group(1), None)
    return list(seen)


def first_pull_request_body(github: GitHubClient, sha: str) -> Optional[str]:
    pulls = github.list_pulls_for_commit(sha)
    return pulls[0].get("body") if pulls else None


def team_done_states(states: Sequence[WorkflowState]) -> Dict[str, str]:
    """Map team id -> id of that team's "Done" workflow state."""
    done = [s for s in states if s.name == DONE_STATE_NAME]
    if not done:
        raise WorkflowStateError("Couldn't find \"Done\" state from Linear workspace")
    return {s.team_id: s.id for s in done if s.team_id}


def mark_issues_as_done(
    github: GitHubClient,
    linear: LinearClient,
    commit_shas: Sequence[str],
    max_workers: Optional[int] = None,
) -> List[str]:
    """
    Move every Linear issue referenced by the PRs of ``commit_shas`` to its team's Done state.

    Returns:
        List[str]: identifiers of the issues that were updated.

    Raises:
        WorkflowStateError: when the workspace has no "Done" state, even if no
            issue is linked.
        IssueTrackerError / GitHubAPIError: on the first failing request.
    """
    bodies = fan_out(lambda sha: first_pull_request_body(github, sha), commit_shas, max_workers)
    issue_ids = extract_issue_ids(bodies)
    logger.debug(f"Linked Linear issues: {issue_ids}")

    issues, state_map = run_both(
        lambda: fan_out(linear.issue, issue_ids, max_workers),
        lambda: team_done_states(linear.workflow_states()),
        max_workers,
    )
    logger.debug("Fetched issues and workflow states from Linear")

    def _update(issue: LinearIssue) -> Optional[str]:
        state_id = state_map.get(issue.team_id or "")
        if not state_id:
            logger.warning(f"No \"Done\" state for the team of {issue.identifier}; skipping")
            return None
        linear.update_issue_state(issue.id, state_id)
        return issue.identifier

    updated = [i for i in fan_out(_update, issues, max_workers) if i]
    logger.debug("Marked linked Linear issues as done")
    return updated
