"""Recognition of user-authored block anchors (``^id`` / ``^(id)``)."""

from __future__ import annotations

import re

# Three or more characters after the caret keeps footnote-style markers
# such as ``[^1]`` or ``[^12]`` from being read as anchors.
_PARENTHESIZED_ANCHOR_RE = re.compile(r"\^\([A-Za-z0-9_-]{3,}\)")
_BARE_ANCHOR_RE = re.compile(r"\^[A-Za-z0-9_-]{3,}")

_ANCHOR_PATTERNS = (_PARENTHESIZED_ANCHOR_RE, _BARE_ANCHOR_RE)


def extract_anchor(line: str) -> str | None:
    """Return the explicit anchor found anywhere in *line*, or ``None``.

    The parenthesized form wins over the bare form; within a form the
    first occurrence wins.  The anchor is returned verbatim, caret (and
    parentheses) included, e.g. ``"^(my-anchor)"`` or ``"^abc123"``.
    """
    for pattern in _ANCHOR_PATTERNS:
        match = pattern.search(line)
        if match:
            return match.group(0)
    return None
