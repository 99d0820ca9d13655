from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from relnotes.core.types import SUPPORTED_TYPES, Entry, ParsedCommit

INTERNAL_COMMIT_MARKER = "internal-commit:"


def capitalize_first(text: str) -> str:
    """Upper-case the first character only; "fix API" -> "Fix API", unlike str.capitalize."""
    return text[:1].upper() + text[1:]


def is_internal(commit: ParsedCommit) -> bool:
    footer = commit.footer or ""
    return footer.lower().startswith(INTERNAL_COMMIT_MARKER)


def scope_matches(scope: Optional[str], target_scope: Optional[str]) -> bool:
    if not scope and not target_scope:
        return True
    return scope == target_scope


def to_entry(commit: ParsedCommit, target_scope: str) -> Optional[Entry]:
    if not commit.type or commit.type not in SUPPORTED_TYPES:
        return None
    if not commit.subject:
        return None
    if not scope_matches(commit.scope, target_scope):
        return None
    return Entry(type=commit.type, text=capitalize_first(commit.subject))


def classify(commits: Iterable[ParsedCommit], target_scope: str) -> Dict[str, List[str]]:
    """
    Group the entries for one scope by commit type, preserving commit order.

    Commits flagged with an ``Internal-commit:`` footer, commits whose type is not
    supported, commits without a subject and commits for other scopes are dropped.
    """
    grouped: Dict[str, List[str]] = {}
    for commit in commits:
        if is_internal(commit):
            continue
        entry = to_entry(commit, target_scope)
        if entry is None:
            continue
        grouped.setdefault(entry.type, []).append(entry.text)
    return grouped


def collect(
    commits: Sequence[ParsedCommit], scope: str, dependent_scopes: Sequence[str] = ()
) -> Dict[str, List[str]]:
    """Entries for ``scope`` followed, per type, by the entries of each dependent scope."""
    result = classify(commits, scope)
    for dependent in dependent_scopes:
        sub = classify(commits, dependent)
        for ctype in SUPPORTED_TYPES:
            result[ctype] = result.get(ctype, []) + sub.get(ctype, [])
    logger.debug(
        "Classified entries: "
        + ", ".join(f"{t}={len(result.get(t, []))}" for t in SUPPORTED_TYPES)
    )
    return result
