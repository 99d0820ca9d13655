from __future__ import annotations

from datetime import date
from typing import List, Mapping, Optional, Sequence

from relnotes.core.types import SUPPORTED_TYPES, TYPE_TITLES


def date_string(today: Optional[date] = None) -> str:
    return (today or date.today()).strftime("%Y-%m-%d")


def paragraph(header: str, items: Sequence[str]) -> str:
    if not items:
        return ""
    return "\n".join([header, *(f"- {item}" for item in items)])


def render_sections(entries: Mapping[str, Sequence[str]]) -> str:
    """Render one paragraph per supported type, enhancements first; empty types are omitted."""
    blocks: List[str] = []
    for ctype in SUPPORTED_TYPES:
        block = paragraph(TYPE_TITLES[ctype], entries.get(ctype) or [])
        if block:
            blocks.append(block)
    return "\n\n".join(blocks)


def render(
    application_name: str,
    version: str,
    compare_url: str,
    entries: Mapping[str, Sequence[str]],
    *,
    deploy_url: str = "",
    today: Optional[date] = None,
) -> str:
    """
    Render the changelog body.

    Example:
        ## web 1.2.0 (2024-05-01)
        Compare URL: https://github.com/o/r/compare/a...b

        *Enhancements*
        - Add dark mode
    """
    lines = [
        f"## {application_name} {version} ({date_string(today)})",
        f"Compare URL: {compare_url}",
    ]
    if deploy_url:
        lines.append(f"Deploy URL: {deploy_url}")
    head = "\n".join(lines)
    sections = render_sections(entries)
    return f"{head}\n\n{sections}".strip()
