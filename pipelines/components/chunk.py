"""KFP v2 component — Chunk markdown notes into identified chunks.

Step 2 of the note chunking pipeline.  Reads the JSON-Lines Dataset
produced by ``fetch_notes`` and assembles each note into chunks with stable
ids: the block anchor when the author wrote one, otherwise the SHA-256 of
the chunk's embedding text.

Structured output contract (one JSON object per line)::

    {
      "chunk_id":       "<anchor or sha256 of embedding_text>",
      "vector_id":      "<doc_id>#<chunk_id>",
      "doc_id":         "obsidian:<vault-relative path>",
      "source":         "<file path>",
      "title":          "<inherited from parent>",
      "tags":           ["<front matter tags>"],
      "aliases":        ["<front matter aliases>"],
      "chunk_type":     "paragraph" | "list_item" | "list_group" | ...,
      "text":           "<raw chunk text>",
      "embedding_text": "H: Setup > Linux. Parent: ... <text>",
      "headings_path":  ["Setup", "Linux"],
      "content_hash":   "<sha256 of text>",
      "note_hash":      "<sha256 of the normalized note>",
      "anchored":       false,
      "chunk_index":    0,
      "chunk_count":    12,
      "char_count":     487,
      "token_estimate": 122,
      ...
    }

See :func:`note_chunker.ingestion.chunker.chunk_records` for every key.

Local testing
-------------
    from pipelines.components.chunk import chunk_notes
    chunk_notes.python_func(
        raw_documents=_FakeArtifact("/tmp/raw.jsonl"),
        chunked_documents=_FakeArtifact("/tmp/chunked.jsonl"),
        metrics=_FakeArtifact("/tmp/metrics"),
    )
"""

from kfp import dsl


@dsl.component(
    base_image="python:3.11-slim",
    packages_to_install=["note-chunker"],
)
def chunk_notes(
    raw_documents: dsl.Input[dsl.Dataset],
    chunked_documents: dsl.Output[dsl.Dataset],
    metrics: dsl.Output[dsl.Metrics],
    group_list_items: bool = True,
    skip_code_blocks: bool = True,
    filter_noise: bool = True,
    split_chunk_size: int = 1200,
    split_chunk_overlap: int = 200,
    max_chunks: int = 0,
) -> str:
    """Assemble every note into identified chunks.

    Parameters
    ----------
    raw_documents:
        Input Dataset — JSON-Lines produced by ``fetch_notes`` with at
        minimum a ``text`` key; ``doc_id``, ``source`` and ``title`` are
        carried through when present, and front matter ``tags`` and
        ``aliases`` are read from the text.
    chunked_documents:
        Output Dataset — JSON-Lines, one record per chunk (see module docstring).
    metrics:
        Output Metrics artifact with chunking statistics.
    group_list_items:
        Merge runs of short sibling list items into one chunk.
    skip_code_blocks:
        Leave fenced code blocks out of the index.
    filter_noise:
        Drop chunks that carry only links, embeds or punctuation.
    split_chunk_size / split_chunk_overlap:
        Character window used to split long paragraphs.
    max_chunks:
        Per-note chunk cap; ``0`` disables it.

    Returns
    -------
    str
        Summary, e.g. ``"Produced 256 chunks from 42 documents"``.
    """
    import json
    import logging
    from pathlib import Path

    from note_chunker.config import ChunkOptions
    from note_chunker.ingestion.chunker import chunk_markdown, chunk_records, note_context, note_hash

    logging.basicConfig(level=logging.INFO)
    log = logging.getLogger("chunk_notes")

    # ── validate params ───────────────────────────────────────────
    options = ChunkOptions(
        group_list_items=group_list_items,
        skip_code_blocks=skip_code_blocks,
        filter_noise=filter_noise,
        split_chunk_size=split_chunk_size,
        split_chunk_overlap=split_chunk_overlap,
        max_chunks=max_chunks or None,
    )

    # ── read raw documents ────────────────────────────────────────
    raw_records: list[dict] = []
    with open(raw_documents.path, encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, 1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                log.warning("Skipping malformed line %d: %s", lineno, exc)
                continue
            if "text" not in obj:
                log.warning("Skipping line %d: missing 'text' key", lineno)
                continue
            raw_records.append(obj)

    log.info("Read %d documents from input artifact", len(raw_records))

    # ── chunk each document ───────────────────────────────────────
    all_chunks: list[dict] = []
    for rec in raw_records:
        context = note_context({
            "source": rec.get("source", ""),
            "doc_id": rec.get("doc_id", "unknown"),
            "title": rec.get("title", ""),
        }, rec["text"])
        chunks = chunk_markdown(rec["text"], options=options)
        all_chunks.extend(
            chunk_records(chunks, context=context, note_hash=note_hash(rec["text"]))
        )

    log.info("Produced %d chunks from %d documents", len(all_chunks), len(raw_records))

    # ── write output ──────────────────────────────────────────────
    out_path = Path(chunked_documents.path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as fh:
        for chunk in all_chunks:
            fh.write(json.dumps(chunk, ensure_ascii=False) + "\n")

    # artifact metadata
    anchored = sum(1 for c in all_chunks if c["anchored"])
    total_chars = sum(c["char_count"] for c in all_chunks)
    chunked_documents.metadata["num_chunks"] = len(all_chunks)
    chunked_documents.metadata["num_documents"] = len(raw_records)
    chunked_documents.metadata["anchored_chunks"] = anchored
    chunked_documents.metadata["total_chars"] = total_chars

    # KFP Metrics
    metrics.log_metric("chunks_produced", len(all_chunks))
    metrics.log_metric("documents_processed", len(raw_records))
    metrics.log_metric("anchored_chunks", anchored)
    metrics.log_metric("avg_chunk_chars",
                       total_chars / len(all_chunks) if all_chunks else 0)

    msg = f"Produced {len(all_chunks)} chunks from {len(raw_records)} documents"
    log.info(msg)
    return msg
