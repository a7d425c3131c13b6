"""Regex-based comment stripping for pasted source code."""

from __future__ import annotations

import re

# Applied in order. No language awareness: markers inside strings go too.
_PATTERNS = (
    re.compile(r"//[^\n\r]*"),
    re.compile(r"#[^\n\r]*"),
    re.compile(r"/\*[\s\S]*?\*/"),
    re.compile(r"<!--[\s\S]*?-->"),
)


def remove_comments(code: str) -> str:
    """Remove line and block comments, then blank lines."""
    if not code:
        return ""

    cleaned = code
    for pattern in _PATTERNS:
        cleaned = pattern.sub("", cleaned)

    return "\n".join(line for line in cleaned.split("\n") if line.strip()).strip()
