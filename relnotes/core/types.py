from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

SUPPORTED_TYPES = ("feat", "fix")

TYPE_TITLES: Dict[str, str] = {
    "feat": "*Enhancements*",
    "fix": "*Bug Fixes*",
}


@dataclass(frozen=True)
class CommitRange:
    """Two commit identifiers bounding the changelog, plus the release they belong to."""

    from_ref: str
    to_ref: str
    tag: str
    version: str
    previous_tag: str = ""
    release_id: Optional[int] = None


@dataclass
class CommitLog:
    compare_url: str
    shas: List[str] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.messages)


@dataclass(frozen=True)
class Note:
    title: str
    text: str


@dataclass(frozen=True)
class ParsedCommit:
    raw: str
    header: Optional[str]
    type: Optional[str]
    scope: Optional[str]
    subject: Optional[str]
    body: Optional[str] = None
    footer: Optional[str] = None
    notes: List[Note] = field(default_factory=list)


@dataclass(frozen=True)
class Entry:
    type: str
    text: str
