"""Note chunking entry points: markdown or LangChain documents in, chunks out."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from note_chunker.chunking.assembler import ChunkAssembler
from note_chunker.chunking.embedding_text import normalize_text
from note_chunker.chunking.hashing import content_hash
from note_chunker.chunking.models import Chunk, NoteContext
from note_chunker.chunking.splitting import rough_token_count
from note_chunker.config import ChunkOptions
from note_chunker.ingestion.parser import parse_markdown, read_frontmatter

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)


def note_hash(markdown: str) -> str:
    """Hash of a whole note's normalized text.

    Lets a re-index job skip notes that have not changed at all before
    chunking them.
    """
    return content_hash(normalize_text(markdown))


def note_context(metadata: dict[str, Any], markdown: str) -> NoteContext:
    """Provenance for one note: loader *metadata* plus front matter tags and aliases."""
    return NoteContext.from_metadata(metadata, frontmatter=read_frontmatter(markdown))


def chunk_markdown(markdown: str, *, options: ChunkOptions | None = None) -> list[Chunk]:
    """Parse *markdown* and assemble it into chunks."""
    return ChunkAssembler(options).assemble(parse_markdown(markdown))


def chunk_documents(
    documents: Sequence[Document],
    *,
    options: ChunkOptions | None = None,
    max_workers: int | None = None,
) -> list[Document]:
    """Chunk each note in *documents* into embedding-ready documents.

    Parameters
    ----------
    documents:
        Source notes produced by a loader; ``page_content`` is the raw
        markdown and ``metadata["source"]`` the note path.
    options:
        Chunking options.  Defaults to ``settings.chunking``.
    max_workers:
        Thread count for fanning out across notes.  Output order always
        follows input order.

    Returns
    -------
    list[Document]
        One document per chunk, ``page_content`` set to the embedding text
        and ``id`` set to ``"<original_id>#<chunk id>"``.
    """
    assembler = ChunkAssembler(options)

    def _chunk_one(doc: Document) -> list[Document]:
        context = note_context(doc.metadata, doc.page_content)
        chunks = assembler.assemble(parse_markdown(doc.page_content))
        logger.debug("Chunked %s into %d chunks", context.note_path or "<unnamed>", len(chunks))
        return [chunk.to_document(context) for chunk in chunks]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        per_note = list(pool.map(_chunk_one, documents))

    result = [doc for docs in per_note for doc in docs]
    logger.info("Chunked %d notes into %d chunks", len(documents), len(result))
    return result


def chunk_records(
    chunks: Sequence[Chunk],
    *,
    context: NoteContext | None = None,
    note_hash: str | None = None,
) -> list[dict[str, Any]]:
    """Serialize *chunks* into JSON-ready records, one per chunk.

    Neighbour ids (``prev_chunk_id`` / ``next_chunk_id``) are taken from
    the list order, so pass all chunks of one note together.
    """
    context = context or NoteContext()
    count = len(chunks)
    records: list[dict[str, Any]] = []
    for position, chunk in enumerate(chunks):
        records.append(
            {
                "chunk_id": chunk.id,
                "vector_id": chunk.vector_id(context.original_id),
                "doc_id": context.original_id,
                "source": context.note_path,
                "title": context.title,
                "tags": list(context.tags),
                "aliases": list(context.aliases),
                "chunk_type": chunk.chunk_type.value,
                "text": chunk.text,
                "embedding_text": chunk.embedding_text,
                "headings_path": list(chunk.headings_path),
                "section": chunk.section,
                "parent_item_text": chunk.parent_item_text,
                "list_depth": chunk.list_depth,
                "item_index": chunk.item_index,
                "item_index_range": list(chunk.item_index_range) if chunk.item_index_range else None,
                "start_line": chunk.start_line,
                "end_line": chunk.end_line,
                "chunk_index": chunk.chunk_index,
                "chunk_count": count,
                "content_hash": chunk.content_hash,
                "note_hash": note_hash,
                "anchored": chunk.is_anchored,
                "prev_chunk_id": chunks[position - 1].id if position > 0 else None,
                "next_chunk_id": chunks[position + 1].id if position + 1 < count else None,
                "char_count": len(chunk.embedding_text),
                "token_estimate": rough_token_count(chunk.embedding_text),
            }
        )
    return records
