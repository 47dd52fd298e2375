"""Intermediate chunk candidates produced while walking a note."""

from __future__ import annotations

from dataclasses import dataclass

from note_chunker.chunking.models import ChunkType


@dataclass(frozen=True)
class Segment:
    """A chunk candidate that has its context but no identity yet.

    Segments flow through filtering, grouping and splitting; the assembler
    turns the survivors into :class:`~note_chunker.chunking.models.Chunk`
    records.

    Attributes
    ----------
    chunk_type:
        Category of the future chunk.
    text:
        Raw content of the block (or of the merged / split piece).
    headings_path:
        Heading titles enclosing the block, outermost first.
    parent_item_text:
        Text of the enclosing list item, for nested blocks.
    list_depth / item_index / item_index_range:
        List position metadata; ``None`` outside lists.
    start_line / end_line:
        1-based inclusive source lines, when known.
    """

    chunk_type: ChunkType
    text: str
    headings_path: tuple[str, ...] = ()
    parent_item_text: str | None = None
    list_depth: int | None = None
    item_index: int | None = None
    item_index_range: tuple[int, int] | None = None
    start_line: int | None = None
    end_line: int | None = None
