"""KFP v2 pipeline — Note chunking workflow.

Two stages connected by a KFP Dataset artifact:

    fetch → chunk

The chunked JSON-Lines artifact is the hand-off point to an external
embedding and indexing step; ``content_hash`` and ``note_hash`` in each
record let that step skip work for unchanged content.

Compile
-------
    python -m pipelines.chunking_pipeline --compile
"""

from kfp import compiler, dsl

from pipelines.components.chunk import chunk_notes
from pipelines.components.fetch import fetch_notes


# ──────────────────────────────────────────────────────────────────────
# Pipeline definition
# ──────────────────────────────────────────────────────────────────────


@dsl.pipeline(
    name="note-chunking-pipeline",
    description=(
        "Read markdown notes from vault directories and assemble them into "
        "chunks with stable anchor or content-hash ids."
    ),
)
def chunking_pipeline(
    # ── Source ──────────────────────────────────────────────────────
    vault_paths: str = '["/data/vault"]',
    glob_pattern: str = "**/*.md",
    # ── Chunking ───────────────────────────────────────────────────
    group_list_items: bool = True,
    skip_code_blocks: bool = True,
    filter_noise: bool = True,
    split_chunk_size: int = 1200,
    split_chunk_overlap: int = 200,
    max_chunks: int = 0,
) -> None:
    """Two-step chunking: fetch → chunk.

    Parameters
    ----------
    vault_paths:
        JSON list of vault directories.
    glob_pattern:
        Note-matching glob inside each vault.
    group_list_items / skip_code_blocks / filter_noise:
        Chunk assembly switches.
    split_chunk_size / split_chunk_overlap:
        Long-paragraph split window, in characters.
    max_chunks:
        Per-note chunk cap; ``0`` disables it.
    """
    # Step 1: fetch notes
    fetch_task = fetch_notes(
        vault_paths=vault_paths,
        glob_pattern=glob_pattern,
    )

    # Step 2: chunk
    chunk_notes(
        raw_documents=fetch_task.outputs["raw_documents"],
        group_list_items=group_list_items,
        skip_code_blocks=skip_code_blocks,
        filter_noise=filter_noise,
        split_chunk_size=split_chunk_size,
        split_chunk_overlap=split_chunk_overlap,
        max_chunks=max_chunks,
    )


# ──────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Note chunking pipeline")
    parser.add_argument(
        "--compile",
        action="store_true",
        help="Compile pipeline to YAML",
    )
    parser.add_argument(
        "--output",
        default="pipelines/compiled/chunking_pipeline.yaml",
        help="Output path for compiled YAML",
    )
    args = parser.parse_args()

    if args.compile:
        compiler.Compiler().compile(chunking_pipeline, args.output)
        print(f"Pipeline compiled → {args.output}")
