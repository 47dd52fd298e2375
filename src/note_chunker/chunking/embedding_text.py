"""Embedding text composition and the single text-normalisation step."""

from __future__ import annotations

import re
from collections.abc import Sequence

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\n.*?\n---[ \t]*(?:\n|\Z)", re.DOTALL)
_LINK_RE = re.compile(r"(?<!\!)\[([^\]]+)\]\(([^)]+)\)")
_EMPHASIS_RE = re.compile(r"(?<![\w*])(\*{1,3}|_{1,3})(?=\S)(.+?)(?<=\S)\1(?![\w*])")
_TRAILING_SPACE_RE = re.compile(r"[ \t]+\n")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Normalise markdown before it is embedded and hashed.

    Strips a leading YAML front-matter block, rewrites ``[title](url)`` as
    ``title (url)``, drops emphasis markers around words, removes trailing
    spaces at line ends, collapses runs of blank lines and trims.

    This is the only normalisation applied on the identity path.  Changing
    it changes every derived chunk id.
    """
    text = _FRONTMATTER_RE.sub("", text or "")
    text = _LINK_RE.sub(r"\1 (\2)", text)
    text = _EMPHASIS_RE.sub(r"\2", text)
    text = _TRAILING_SPACE_RE.sub("\n", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def build_embedding_text(
    headings_path: Sequence[str],
    parent_item_text: str | None,
    text: str,
) -> str:
    """Prefix *text* with its heading path and parent item.

    >>> build_embedding_text(["Intro", "Background"], "Overview item", "Some detail.")
    'H: Intro > Background. Parent: Overview item. Some detail.'
    >>> build_embedding_text([], None, "Standalone.")
    'Standalone.'
    """
    heading = f"H: {' > '.join(headings_path)}. " if headings_path else ""
    parent = f"Parent: {parent_item_text}. " if parent_item_text else ""
    return f"{heading}{parent}{text}".strip()
