"""Split overly long paragraphs into overlapping pieces."""

from __future__ import annotations

import math
from dataclasses import replace

from langchain_text_splitters import RecursiveCharacterTextSplitter

from note_chunker.chunking.anchors import extract_anchor
from note_chunker.chunking.models import ChunkType
from note_chunker.chunking.segments import Segment

_SENTENCE_SEPARATORS = ["\n\n", "\n", ". ", "! ", "? ", "; ", ", ", " ", ""]


def rough_token_count(text: str) -> int:
    """Estimate tokens at roughly four characters per token."""
    return math.ceil(len(text) / 4) if text else 0


def is_long_paragraph(text: str, *, word_threshold: int, token_threshold: int) -> bool:
    return len(text.split()) > word_threshold or rough_token_count(text) > token_threshold


def split_long_paragraphs(
    segments: list[Segment],
    *,
    word_threshold: int = 300,
    token_threshold: int = 800,
    chunk_size: int = 1200,
    chunk_overlap: int = 200,
) -> list[Segment]:
    """Replace each long paragraph segment with several shorter ones.

    Pieces keep the paragraph's heading path, parent and line range.
    Paragraphs carrying an explicit anchor are left whole, since the
    anchor names the entire block.
    """
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=_SENTENCE_SEPARATORS,
        keep_separator="end",
    )

    result: list[Segment] = []
    for segment in segments:
        if (
            segment.chunk_type != ChunkType.PARAGRAPH
            or extract_anchor(segment.text) is not None
            or not is_long_paragraph(segment.text, word_threshold=word_threshold, token_threshold=token_threshold)
        ):
            result.append(segment)
            continue
        pieces = splitter.split_text(segment.text)
        result.extend(replace(segment, text=piece) for piece in pieces if piece.strip())
    return result
