"""Chunk assembler — walks parsed note blocks and emits identified chunks.

Usage::

    from note_chunker.chunking import ChunkAssembler
    from note_chunker.ingestion.parser import parse_markdown

    chunks = ChunkAssembler().assemble(parse_markdown(markdown))
    for chunk in chunks:
        print(chunk.id[:12], chunk.embedding_text[:80])

Boundary policy
---------------
One chunk per paragraph, list item, table, quote and (optionally) code
block, each scoped to the headings enclosing it.  Headings are context,
never chunks.  Short sibling list items may then be grouped and long
paragraphs split (see :class:`~note_chunker.config.ChunkOptions`).

Identity
--------
A chunk whose raw text carries an anchor (``^(id)`` or ``^id``) is
identified by that anchor verbatim.  Every other chunk is identified by
the SHA-256 of its embedding text, so the same words under a different
heading path get a different id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from note_chunker.chunking.anchors import extract_anchor
from note_chunker.chunking.embedding_text import build_embedding_text, normalize_text
from note_chunker.chunking.filters import is_noise
from note_chunker.chunking.grouping import group_short_list_items
from note_chunker.chunking.hashing import content_hash
from note_chunker.chunking.models import (
    Block,
    BlockKind,
    Chunk,
    ChunkIdentity,
    ChunkType,
    DerivedHash,
    ExplicitAnchor,
)
from note_chunker.chunking.segments import Segment
from note_chunker.chunking.splitting import split_long_paragraphs
from note_chunker.config import ChunkOptions, settings

logger = logging.getLogger(__name__)

_LEAF_TYPES: dict[str, ChunkType] = {
    BlockKind.PARAGRAPH.value: ChunkType.PARAGRAPH,
    BlockKind.TABLE.value: ChunkType.TABLE,
    BlockKind.QUOTE.value: ChunkType.QUOTE,
    BlockKind.CODE.value: ChunkType.CODE,
}

# Structural blocks with no indexable content.
_SKIPPED_KINDS = frozenset(
    {BlockKind.FRONTMATTER.value, BlockKind.THEMATIC_BREAK.value, BlockKind.COMMENT.value}
)


@dataclass
class _Frame:
    """One level of the explicit traversal stack."""

    blocks: Iterator[Block]
    parent_item_text: str | None = None
    list_depth: int = 0
    item_counter: int = 0


def identify(segment: Segment) -> ChunkIdentity:
    """Return the identity for *segment*: its anchor, else its content hash."""
    anchor = extract_anchor(segment.text)
    if anchor is not None:
        return ExplicitAnchor(anchor=anchor)
    embedding_text = build_embedding_text(
        segment.headings_path, segment.parent_item_text, normalize_text(segment.text)
    )
    return DerivedHash(digest=content_hash(embedding_text))


class ChunkAssembler:
    """Turn a note's block tree into an ordered list of :class:`Chunk`.

    The assembler keeps no state between calls; one instance can serve
    any number of notes, including from several threads.

    Parameters
    ----------
    options:
        Chunking options.  Defaults to ``settings.chunking``.
    """

    def __init__(self, options: ChunkOptions | None = None) -> None:
        self.options = options or settings.chunking

    # -- public API -----------------------------------------------------------

    def assemble(self, blocks: Sequence[Block]) -> list[Chunk]:
        """Walk *blocks* in document order and return identified chunks.

        An empty block sequence yields an empty list.
        """
        opts = self.options
        segments = self.segment(blocks)

        if opts.filter_noise:
            segments = [s for s in segments if not is_noise(s.text)]
        if opts.group_list_items:
            segments = group_short_list_items(
                segments,
                short_char_threshold=opts.list_short_char_threshold,
                group_min=opts.list_group_min,
                group_max=opts.list_group_max,
            )
        segments = split_long_paragraphs(
            segments,
            word_threshold=opts.long_paragraph_word_threshold,
            token_threshold=opts.long_paragraph_token_threshold,
            chunk_size=opts.split_chunk_size,
            chunk_overlap=opts.split_chunk_overlap,
        )

        chunks = self._identify_all(segments)
        if opts.max_chunks is not None and len(chunks) > opts.max_chunks:
            logger.warning("Truncating %d chunks to max_chunks=%d", len(chunks), opts.max_chunks)
            chunks = chunks[: opts.max_chunks]
        logger.debug("Assembled %d chunks from %d top-level blocks", len(chunks), len(blocks))
        return chunks

    def segment(self, blocks: Sequence[Block]) -> list[Segment]:
        """Walk *blocks* and return unfiltered chunk candidates.

        The walk is iterative: nested lists push a frame on an explicit
        stack instead of recursing, so deeply nested notes cannot exhaust
        the interpreter stack.
        """
        headings: list[tuple[int, str]] = []
        frames: list[_Frame] = [_Frame(blocks=iter(blocks))]
        segments: list[Segment] = []

        while frames:
            frame = frames[-1]
            block = next(frame.blocks, None)
            if block is None:
                frames.pop()
                continue

            kind = str(getattr(block.kind, "value", block.kind))
            if kind != BlockKind.LIST_ITEM.value:
                frame.item_counter = 0

            if kind == BlockKind.HEADING.value:
                level = block.level or 1
                while headings and headings[-1][0] >= level:
                    headings.pop()
                headings.append((level, block.text.strip()))
                continue

            if kind == BlockKind.LIST.value:
                frames.append(
                    _Frame(
                        blocks=iter(block.children),
                        parent_item_text=frame.parent_item_text,
                        list_depth=frame.list_depth,
                    )
                )
                continue

            path = tuple(title for _, title in headings)

            if kind == BlockKind.LIST_ITEM.value:
                frame.item_counter += 1
                segments.append(
                    Segment(
                        chunk_type=ChunkType.LIST_ITEM,
                        text=block.text,
                        headings_path=path,
                        parent_item_text=frame.parent_item_text,
                        list_depth=frame.list_depth,
                        item_index=frame.item_counter,
                        start_line=block.start_line,
                        end_line=block.end_line,
                    )
                )
                if block.children:
                    frames.append(
                        _Frame(
                            blocks=iter(block.children),
                            parent_item_text=block.text,
                            list_depth=frame.list_depth + 1,
                        )
                    )
                continue

            chunk_type = self._leaf_type(kind)
            if chunk_type is None:
                continue
            segments.append(
                Segment(
                    chunk_type=chunk_type,
                    text=block.text,
                    headings_path=path,
                    parent_item_text=frame.parent_item_text,
                    list_depth=frame.list_depth if frame.parent_item_text is not None else None,
                    start_line=block.start_line,
                    end_line=block.end_line,
                )
            )

        return segments

    # -- internals ------------------------------------------------------------

    def _leaf_type(self, kind: str) -> ChunkType | None:
        if kind in _SKIPPED_KINDS:
            return None
        if kind == BlockKind.CODE.value and self.options.skip_code_blocks:
            return None
        if kind == BlockKind.CALLOUT.value:
            return None if self.options.filter_noise else ChunkType.QUOTE
        chunk_type = _LEAF_TYPES.get(kind)
        if chunk_type is None:
            logger.debug("Treating unknown block kind %r as an opaque chunk", kind)
            return ChunkType.OPAQUE
        return chunk_type

    def _identify_all(self, segments: list[Segment]) -> list[Chunk]:
        chunks: list[Chunk] = []
        seen: set[str] = set()
        for segment in segments:
            identity = identify(segment)
            if identity.value in seen:
                logger.warning(
                    "Dropping duplicate chunk %s (line %s)", identity.value[:16], segment.start_line
                )
                continue
            seen.add(identity.value)
            chunks.append(
                Chunk(
                    identity=identity,
                    chunk_type=segment.chunk_type,
                    headings_path=segment.headings_path,
                    parent_item_text=segment.parent_item_text,
                    text=segment.text,
                    chunk_index=len(chunks),
                    list_depth=segment.list_depth,
                    item_index=segment.item_index,
                    item_index_range=segment.item_index_range,
                    start_line=segment.start_line,
                    end_line=segment.end_line,
                )
            )
        return chunks
