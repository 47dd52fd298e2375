"""Command-line entry point: chunk a note or a vault into JSON-Lines.

Usage::

    note-chunker ~/vault -o chunks.jsonl
    note-chunker ~/vault/Setup.md --log-level DEBUG
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from note_chunker.config import settings
from note_chunker.ingestion.chunker import chunk_markdown, chunk_records, note_context, note_hash
from note_chunker.ingestion.loader import load_note, load_notes

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="note-chunker",
        description="Chunk markdown notes into records with stable ids",
    )
    parser.add_argument("path", type=Path, help="A markdown note or a directory of notes")
    parser.add_argument(
        "--glob",
        default=settings.notes_glob,
        help="Note-matching glob when PATH is a directory",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output JSON-Lines file (default: stdout)",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Root log level")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if not args.path.exists():
        parser.error(f"path not found: {args.path}")

    documents = load_notes(args.path, glob=args.glob) if args.path.is_dir() else load_note(args.path)

    records: list[dict] = []
    for doc in documents:
        context = note_context(doc.metadata, doc.page_content)
        chunks = chunk_markdown(doc.page_content, options=settings.chunking)
        records.extend(chunk_records(chunks, context=context, note_hash=note_hash(doc.page_content)))

    if args.output is None:
        for record in records:
            sys.stdout.write(json.dumps(record, ensure_ascii=False) + "\n")
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as fh:
            for record in records:
                fh.write(json.dumps(record, ensure_ascii=False) + "\n")

    logger.info("Wrote %d chunks from %d notes", len(records), len(documents))
    return 0


if __name__ == "__main__":
    sys.exit(main())
