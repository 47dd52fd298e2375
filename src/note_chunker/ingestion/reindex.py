"""Incremental re-index planning from chunk ids and content hashes."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from pydantic import BaseModel, Field

from note_chunker.chunking.models import Chunk

logger = logging.getLogger(__name__)


class ReindexPlan(BaseModel):
    """What an index must do to match a freshly chunked note."""

    created: list[Chunk] = Field(default_factory=list)
    updated: list[Chunk] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)

    @property
    def to_embed(self) -> list[Chunk]:
        """Chunks whose embedding must be (re)computed."""
        return [*self.created, *self.updated]


def plan_reindex(chunks: Sequence[Chunk], indexed: Mapping[str, str]) -> ReindexPlan:
    """Diff freshly assembled *chunks* against what is already indexed.

    Parameters
    ----------
    chunks:
        Current chunks of one note, in document order.
    indexed:
        Mapping of chunk id to the ``content_hash`` stored at index time.

    Returns
    -------
    ReindexPlan
        ``created`` for ids the index has never seen, ``updated`` for ids
        whose content hash changed (only possible for anchored chunks),
        ``unchanged`` ids, and ``removed`` ids (sorted) that no longer
        appear in the note.
    """
    plan = ReindexPlan()
    current: set[str] = set()
    for chunk in chunks:
        current.add(chunk.id)
        stored = indexed.get(chunk.id)
        if stored is None:
            plan.created.append(chunk)
        elif stored != chunk.content_hash:
            plan.updated.append(chunk)
        else:
            plan.unchanged.append(chunk.id)
    plan.removed = sorted(set(indexed) - current)

    logger.info(
        "Reindex plan: %d created, %d updated, %d unchanged, %d removed",
        len(plan.created),
        len(plan.updated),
        len(plan.unchanged),
        len(plan.removed),
    )
    return plan
