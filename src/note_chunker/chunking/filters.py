"""Noise filtering — blocks that carry no indexable prose."""

from __future__ import annotations

import re

_EMBED_ONLY_RE = re.compile(r"^!\[\[.*\]\]$")
_SEPARATOR_RE = re.compile(r"^-{3,}$")
_CALLOUT_RE = re.compile(r"^>\s*\[![\w-]+\][+-]?")
_LINK_RE = re.compile(r"!?\[\[[^\]]*\]\]|!?\[[^\]]*\]\([^)]*\)")
_ANCHOR_RE = re.compile(r"\^\([\w-]+\)|\^[\w-]+")
_WORD_CHAR_RE = re.compile(r"[^\W_]")


def is_noise(text: str) -> bool:
    """Return ``True`` when *text* should not become a chunk.

    Noise is an embed on its own (``![[file]]``), a horizontal separator,
    an Obsidian callout (``> [!note]``), or a block that is nothing but
    links, embeds, anchors and punctuation once those are removed.

    Blank text is *not* noise: degenerate chunks are left for the
    downstream indexer to decide on.
    """
    stripped = text.strip()
    if not stripped:
        return False
    if _EMBED_ONLY_RE.match(stripped) or _SEPARATOR_RE.match(stripped) or _CALLOUT_RE.match(stripped):
        return True
    residue = _ANCHOR_RE.sub("", _LINK_RE.sub("", stripped))
    return _WORD_CHAR_RE.search(residue) is None
