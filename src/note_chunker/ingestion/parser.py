"""Line-based markdown segmentation into :class:`Block` trees.

This is deliberately not a full CommonMark parser.  It recognises the
structure the chunker needs: ATX headings, paragraphs, nested bullet and
numbered lists, fenced code, pipe tables, blockquotes, Obsidian callouts
and ``%%`` comments, thematic breaks, and YAML front matter.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml

from note_chunker.chunking.models import Block, BlockKind

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
_HEADING_RE = re.compile(r"^\s{0,3}(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
_THEMATIC_BREAK_RE = re.compile(r"^\s{0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
_TABLE_RE = re.compile(r"^\s*\|.*\|\s*$")
_QUOTE_RE = re.compile(r"^\s{0,3}>\s?")
_CALLOUT_RE = re.compile(r"^\s{0,3}>\s*\[![\w-]+\][+-]?")
_LIST_ITEM_RE = re.compile(r"^([ \t]*)(?:[-*+]|\d+[.)])\s+(.*)$")
_HEADING_ANCHOR_RE = re.compile(r"\s+\^(?:\([A-Za-z0-9_-]{3,}\)|[A-Za-z0-9_-]{3,})$")
_COMMENT_FENCE = "%%"


class _BlockBuilder:
    """Accumulates blocks while scanning lines."""

    def __init__(self) -> None:
        self.blocks: list[Block] = []
        self.paragraph: list[str] = []
        self.paragraph_start = 0
        self.list_block: Block | None = None
        self.item_stack: list[tuple[int, Block]] = []

    # -- paragraphs -----------------------------------------------------------

    def add_paragraph_line(self, line: str, line_no: int) -> None:
        if not self.paragraph:
            self.paragraph_start = line_no
        self.paragraph.append(line.strip())

    def flush_paragraph(self, end_line: int) -> None:
        text = "\n".join(self.paragraph).strip()
        if text:
            self.blocks.append(
                Block(kind=BlockKind.PARAGRAPH, text=text, start_line=self.paragraph_start, end_line=end_line)
            )
        self.paragraph = []

    # -- lists ----------------------------------------------------------------

    @property
    def in_list(self) -> bool:
        return self.list_block is not None and bool(self.item_stack)

    def add_item(self, depth: int, text: str, line_no: int) -> None:
        if self.list_block is None:
            self.list_block = Block(kind=BlockKind.LIST, start_line=line_no, end_line=line_no)
            self.blocks.append(self.list_block)

        while self.item_stack and self.item_stack[-1][0] >= depth:
            self.item_stack.pop()
        parent = self.item_stack[-1][1] if self.item_stack else self.list_block

        item = Block(kind=BlockKind.LIST_ITEM, text=text, start_line=line_no, end_line=line_no)
        parent.children.append(item)
        self.item_stack.append((depth, item))
        self.list_block.end_line = line_no

    def continue_item(self, line: str, line_no: int) -> None:
        item = self.item_stack[-1][1]
        item.text = f"{item.text} {line.strip()}".strip()
        item.end_line = line_no
        if self.list_block is not None:
            self.list_block.end_line = line_no

    def close_list(self) -> None:
        self.list_block = None
        self.item_stack = []

    # -- everything else ------------------------------------------------------

    def close_all(self, line_no: int) -> None:
        self.flush_paragraph(line_no - 1)
        self.close_list()

    def add(self, block: Block) -> None:
        self.blocks.append(block)


def _item_depth(indent: str) -> int:
    return len(indent.replace("\t", "  ")) // 2


def parse_markdown(markdown: str) -> list[Block]:
    """Segment *markdown* into a list of top-level blocks.

    Lists become a ``list`` block whose ``children`` are ``list_item``
    blocks; nested items hang off their parent item.  Heading blocks carry
    the title in ``text`` and the level in ``level``.  Line numbers are
    1-based and inclusive.

    An empty or whitespace-only note yields an empty list.
    """
    lines = (markdown or "").splitlines()
    builder = _BlockBuilder()
    i = 0

    # front matter
    if lines and lines[0].strip() == "---":
        for j in range(1, len(lines)):
            if lines[j].strip() in ("---", "..."):
                builder.add(
                    Block(kind=BlockKind.FRONTMATTER, text="\n".join(lines[1:j]), start_line=1, end_line=j + 1)
                )
                i = j + 1
                break

    after_blank = False
    while i < len(lines):
        line = lines[i]
        line_no = i + 1

        fence = _FENCE_RE.match(line)
        if fence:
            builder.close_all(line_no)
            marker = fence.group(1)
            body = [line]
            i += 1
            while i < len(lines):
                body.append(lines[i])
                if lines[i].strip().startswith(marker[0] * len(marker)):
                    break
                i += 1
            builder.add(
                Block(kind=BlockKind.CODE, text="\n".join(body), start_line=line_no, end_line=min(i, len(lines) - 1) + 1)
            )
            i += 1
            after_blank = False
            continue

        if line.strip().startswith(_COMMENT_FENCE):
            builder.close_all(line_no)
            body = [line]
            single_line = line.strip() != _COMMENT_FENCE and line.strip().endswith(_COMMENT_FENCE)
            if not single_line:
                i += 1
                while i < len(lines):
                    body.append(lines[i])
                    if lines[i].strip().endswith(_COMMENT_FENCE):
                        break
                    i += 1
            builder.add(
                Block(kind=BlockKind.COMMENT, text="\n".join(body), start_line=line_no, end_line=min(i, len(lines) - 1) + 1)
            )
            i += 1
            after_blank = False
            continue

        if not line.strip():
            builder.flush_paragraph(line_no - 1)
            after_blank = True
            i += 1
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            builder.close_all(line_no)
            builder.add(
                Block(
                    kind=BlockKind.HEADING,
                    text=_HEADING_ANCHOR_RE.sub("", heading.group(2)).strip(),
                    level=len(heading.group(1)),
                    start_line=line_no,
                    end_line=line_no,
                )
            )
            i += 1
            after_blank = False
            continue

        if _THEMATIC_BREAK_RE.match(line):
            builder.close_all(line_no)
            builder.add(Block(kind=BlockKind.THEMATIC_BREAK, text=line.strip(), start_line=line_no, end_line=line_no))
            i += 1
            after_blank = False
            continue

        if _TABLE_RE.match(line):
            builder.close_all(line_no)
            start = i
            while i < len(lines) and _TABLE_RE.match(lines[i]):
                i += 1
            builder.add(
                Block(kind=BlockKind.TABLE, text="\n".join(l.strip() for l in lines[start:i]), start_line=line_no, end_line=i)
            )
            after_blank = False
            continue

        if _QUOTE_RE.match(line):
            builder.close_all(line_no)
            start = i
            while i < len(lines) and _QUOTE_RE.match(lines[i]):
                i += 1
            raw = lines[start:i]
            if _CALLOUT_RE.match(raw[0]):
                block = Block(kind=BlockKind.CALLOUT, text="\n".join(l.strip() for l in raw), start_line=line_no, end_line=i)
            else:
                text = "\n".join(_QUOTE_RE.sub("", l).rstrip() for l in raw).strip()
                block = Block(kind=BlockKind.QUOTE, text=text, start_line=line_no, end_line=i)
            builder.add(block)
            after_blank = False
            continue

        item = _LIST_ITEM_RE.match(line)
        if item:
            builder.flush_paragraph(line_no - 1)
            builder.add_item(_item_depth(item.group(1)), item.group(2).strip(), line_no)
            i += 1
            after_blank = False
            continue

        # Continuation of the last list item: a lazy line right after it, or
        # an indented line after a blank.
        if builder.in_list and not builder.paragraph and (not after_blank or line[:1] in (" ", "\t")):
            builder.continue_item(line, line_no)
        else:
            builder.close_list()
            builder.add_paragraph_line(line, line_no)
        i += 1
        after_blank = False

    builder.flush_paragraph(len(lines))
    logger.debug("Parsed %d lines into %d top-level blocks", len(lines), len(builder.blocks))
    return builder.blocks


def read_frontmatter(markdown: str) -> dict[str, Any]:
    """Return the note's YAML front matter as a mapping.

    A note without front matter, or whose front matter is not a YAML
    mapping, gives ``{}``; malformed YAML is logged and also gives ``{}``.
    """
    blocks = parse_markdown(markdown)
    if not blocks or blocks[0].kind != BlockKind.FRONTMATTER:
        return {}
    try:
        data = yaml.safe_load(blocks[0].text) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed front matter: %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring front matter that is not a mapping (%s)", type(data).__name__)
        return {}
    return data
