"""
Chunking — stable identities and embedding text for note chunks.

This package is pure: no I/O, no network, no global caches.  Given the
same blocks and options it always produces the same chunks.

Public surface
--------------
- :class:`ChunkAssembler` — walks parsed blocks and emits chunks.
- :class:`Chunk`, :class:`Block`, :class:`ExplicitAnchor`,
  :class:`DerivedHash` — data models.
- :func:`content_hash`, :func:`extract_anchor`,
  :func:`build_embedding_text`, :func:`normalize_text` — the identity
  building blocks.
"""

from note_chunker.chunking.anchors import extract_anchor
from note_chunker.chunking.assembler import ChunkAssembler, identify
from note_chunker.chunking.embedding_text import build_embedding_text, normalize_text
from note_chunker.chunking.hashing import content_hash
from note_chunker.chunking.models import (
    Block,
    BlockKind,
    Chunk,
    ChunkIdentity,
    ChunkType,
    DerivedHash,
    ExplicitAnchor,
    NoteContext,
)
from note_chunker.chunking.segments import Segment

__all__ = [
    "Block",
    "BlockKind",
    "Chunk",
    "ChunkAssembler",
    "ChunkIdentity",
    "ChunkType",
    "DerivedHash",
    "ExplicitAnchor",
    "NoteContext",
    "Segment",
    "build_embedding_text",
    "content_hash",
    "extract_anchor",
    "identify",
    "normalize_text",
]
