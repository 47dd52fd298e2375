"""KFP v2 components — each file exports one @dsl.component."""

from pipelines.components.chunk import chunk_notes
from pipelines.components.fetch import fetch_notes

__all__ = [
    "chunk_notes",
    "fetch_notes",
]
