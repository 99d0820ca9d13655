"""
Conventional commit message parser.

Follows the default grammar of the widely used ``conventional-commits-parser``:
a ``type(scope): subject`` header, a free-form body, and a footer that starts at
the first note (``BREAKING CHANGE: ...``) or issue reference (``Closes #12``).
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from relnotes.core.types import Note, ParsedCommit

HEADER_PATTERN = re.compile(r"^(\w*)(?:\(([\w$.\-*/ ]*)\))?: (.*)$")

DEFAULT_NOTE_KEYWORDS = ("BREAKING CHANGE", "BREAKING-CHANGE", "Internal-Commit")

REFERENCE_ACTIONS = (
    "close",
    "closes",
    "closed",
    "fix",
    "fixes",
    "fixed",
    "resolve",
    "resolves",
    "resolved",
)

_REFERENCE_PATTERN = re.compile(
    r"(?:^|\s)(?:" + "|".join(REFERENCE_ACTIONS) + r")\s+(?:[\w.-]+/[\w.-]+)?#\d+",
    re.IGNORECASE,
)


def _notes_pattern(keywords: Sequence[str]) -> re.Pattern[str]:
    joined = "|".join(re.escape(k) for k in keywords)
    return re.compile(r"^[\s|*]*(" + joined + r")[:\s]+(.*)", re.IGNORECASE)


def _join(lines: List[str]) -> Optional[str]:
    text = "\n".join(lines).strip()
    return text or None


def parse(message: str, note_keywords: Sequence[str] = DEFAULT_NOTE_KEYWORDS) -> ParsedCommit:
    """
    Parse one raw commit message.

    Parameters:
        message (str): Full commit message (header, body and footer).
        note_keywords (Sequence[str]): Keywords that open a footer note; matched case-insensitively.

    Returns:
        ParsedCommit: ``type``, ``scope`` and ``subject`` are ``None`` when the header does
        not follow the ``type(scope): subject`` grammar.
    """
    raw = message or ""
    lines = raw.strip().splitlines()
    if not lines:
        return ParsedCommit(raw=raw, header=None, type=None, scope=None, subject=None)

    header = lines[0].strip()
    match = HEADER_PATTERN.match(header)
    if match:
        ctype = match.group(1) or None
        scope = match.group(2) if match.group(2) else None
        subject = match.group(3) or None
    else:
        ctype = scope = subject = None

    notes_re = _notes_pattern(note_keywords)
    body: List[str] = []
    footer: List[str] = []
    notes: List[Note] = []
    in_body = True
    continue_note = False

    for line in lines[1:]:
        note_match = notes_re.match(line)
        if note_match:
            in_body = False
            continue_note = True
            footer.append(line)
            notes.append(Note(title=note_match.group(1), text=note_match.group(2).strip()))
            continue
        if _REFERENCE_PATTERN.search(line):
            in_body = False
            continue_note = False
            footer.append(line)
            continue
        if continue_note:
            last = notes[-1]
            notes[-1] = Note(title=last.title, text=(last.text + "\n" + line).strip())
            footer.append(line)
            continue
        if in_body:
            body.append(line)
        else:
            footer.append(line)

    return ParsedCommit(
        raw=raw,
        header=header,
        type=ctype,
        scope=scope,
        subject=subject,
        body=_join(body),
        footer=_join(footer),
        notes=notes,
    )


def parse_all(
    messages: Iterable[str], note_keywords: Sequence[str] = DEFAULT_NOTE_KEYWORDS
) -> List[ParsedCommit]:
    return [parse(m, note_keywords) for m in messages]
