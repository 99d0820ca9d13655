from typing import Optional, Sequence


class RelnotesError(Exception):
    pass


class ConfigError(RelnotesError):
    """Missing or inconsistent configuration input."""


class ReleaseNotFoundError(RelnotesError):
    """No earlier release matches the configured tag prefix."""

    def __init__(self, tag_prefix: str, current_tag: str) -> None:
        self.tag_prefix = tag_prefix
        self.current_tag = current_tag
        super().__init__(
            f"Could not find previous release for '{current_tag}' (tag_prefix='{tag_prefix}')"
        )


class TagNotFoundError(RelnotesError):
    """Fewer than two tags match the configured tag prefix."""

    def __init__(self, tag_prefix: str, found: Sequence[str]) -> None:
        self.tag_prefix = tag_prefix
        self.found = list(found)
        super().__init__(
            f"Need at least two tags matching prefix '{tag_prefix}', "
            f"found: {', '.join(self.found) or 'none'}"
        )


class GitCommandError(RelnotesError):
    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        """
        Initialize the exception for a failed ``git`` invocation.

        Parameters:
            args (Sequence[str]): Full command line that was executed.
            returncode (int): Non-zero exit status reported by the process.
            stderr (str): Captured standard error; may be empty.
        """
        self.command = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(
            f"'{' '.join(self.command)}' exited with status {returncode}{detail}"
        )


class GitHubAPIError(RelnotesError):
    def __init__(
        self, method: str, url: str, status_code: int, message: Optional[str] = None
    ) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        text = f"GitHub API {method} {url} failed with HTTP {status_code}"
        if message:
            text += f": {message}"
        super().__init__(text)


class IssueTrackerError(RelnotesError):
    """Linear API request failed or returned an unexpected payload."""


class WorkflowStateError(IssueTrackerError):
    """No "Done" workflow state exists in the Linear workspace."""
