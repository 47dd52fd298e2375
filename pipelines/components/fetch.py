"""KFP v2 component — Collect markdown notes from one or more vault directories.

Step 1 of the note chunking pipeline.  Walks every vault directory, reads
each matching note verbatim (markdown structure is kept for the chunker),
and emits a structured JSON-Lines Dataset artifact.

Structured output contract (one JSON object per line)::

    {
      "doc_id":       "obsidian:<path relative to the vault>",
      "source":       "<file path>",
      "title":        "<first H1, else the file stem>",
      "text":         "<raw markdown>",
      "fetched_at":   "<ISO-8601 timestamp>",
      "char_count":   1234
    }

``doc_id`` depends only on where the note lives, so editing a note keeps
the ``<doc_id>#<chunk_id>`` vector ids of its unchanged chunks.

Local testing
-------------
    from pipelines.components.fetch import fetch_notes
    fetch_notes.python_func(
        vault_paths='["/data/vault"]',
        raw_documents=_FakeArtifact("/tmp/out.jsonl"),
        metrics=_FakeArtifact("/tmp/metrics"),
    )
"""

from kfp import dsl


@dsl.component(base_image="python:3.11-slim")
def fetch_notes(
    vault_paths: str,
    raw_documents: dsl.Output[dsl.Dataset],
    metrics: dsl.Output[dsl.Metrics],
    glob_pattern: str = "**/*.md",
) -> str:
    """Read every note under the given vaults and emit JSON-Lines.

    Parameters
    ----------
    vault_paths:
        JSON-encoded **list** of vault directories, e.g. ``["/mnt/vault"]``.
    raw_documents:
        Output Dataset — one JSON object per line (see module docstring).
    metrics:
        Output Metrics artifact with fetch statistics.
    glob_pattern:
        File-matching glob applied inside each vault.

    Returns
    -------
    str
        Human-readable summary.
    """
    import json
    import logging
    import re
    from datetime import datetime, timezone
    from pathlib import Path

    logging.basicConfig(level=logging.INFO)
    log = logging.getLogger("fetch_notes")

    # ── helpers ────────────────────────────────────────────────────
    def _title(text: str, fallback: str) -> str:
        for line in text.splitlines():
            match = re.match(r"^#\s+(.+?)\s*#*\s*$", line)
            if match:
                return match.group(1)
        return fallback

    def _read_vault(dir_path: str) -> list:
        records = []
        root = Path(dir_path)
        if not root.is_dir():
            raise FileNotFoundError(f"Vault directory not found: {dir_path}")
        for fpath in sorted(root.glob(glob_pattern)):
            if not fpath.is_file():
                continue
            try:
                text = fpath.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                log.warning("Skipping %s: %s", fpath, exc)
                continue
            if not text.strip():
                continue
            records.append({
                "doc_id": f"obsidian:{fpath.relative_to(root).as_posix()}",
                "source": str(fpath),
                "title": _title(text, fpath.stem),
                "text": text,
                "fetched_at": datetime.now(timezone.utc).isoformat(),
                "char_count": len(text),
            })
        return records

    # ── main logic ────────────────────────────────────────────────
    path_list = json.loads(vault_paths) if isinstance(vault_paths, str) else vault_paths
    if not isinstance(path_list, list) or not path_list:
        raise ValueError(
            f"'vault_paths' must be a non-empty JSON list, got: {vault_paths!r}"
        )

    documents: list[dict] = []
    errors: list[str] = []
    for dir_path in path_list:
        try:
            documents.extend(_read_vault(dir_path))
        except FileNotFoundError as exc:
            errors.append(f"{dir_path}: {exc}")
            log.error("✗ %s: %s", dir_path, exc)

    if not documents and errors:
        raise RuntimeError(
            "All vaults failed:\n" + "\n".join(errors)
        )

    # ── persist ───────────────────────────────────────────────────
    out_path = Path(raw_documents.path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as fh:
        for doc in documents:
            fh.write(json.dumps(doc, ensure_ascii=False) + "\n")

    # artifact metadata
    raw_documents.metadata["num_documents"] = len(documents)
    raw_documents.metadata["total_chars"] = sum(d["char_count"] for d in documents)
    raw_documents.metadata["num_errors"] = len(errors)

    # KFP Metrics
    metrics.log_metric("documents_fetched", len(documents))
    metrics.log_metric("fetch_errors", len(errors))
    metrics.log_metric("total_chars", sum(d["char_count"] for d in documents))

    msg = f"Fetched {len(documents)} notes ({len(errors)} errors)"
    log.info(msg)
    return msg
