"""Merge runs of short list items into ``list_group`` segments."""

from __future__ import annotations

from dataclasses import replace

from note_chunker.chunking.anchors import extract_anchor
from note_chunker.chunking.models import ChunkType
from note_chunker.chunking.segments import Segment

GROUP_BULLET = "• "


def _is_candidate(segment: Segment, short_char_threshold: int) -> bool:
    # Anchored items keep their own chunk so the anchor maps to one item.
    return (
        segment.chunk_type == ChunkType.LIST_ITEM
        and len(segment.text) < short_char_threshold
        and extract_anchor(segment.text) is None
    )


def _same_list(a: Segment, b: Segment) -> bool:
    return (
        a.headings_path == b.headings_path
        and a.list_depth == b.list_depth
        and a.parent_item_text == b.parent_item_text
    )


def group_short_list_items(
    segments: list[Segment],
    *,
    short_char_threshold: int = 120,
    group_min: int = 3,
    group_max: int = 7,
) -> list[Segment]:
    """Collapse consecutive short sibling list items into one segment.

    A run of at least *group_min* (and at most *group_max*) items, each
    shorter than *short_char_threshold* characters and sharing heading
    path, depth and parent, becomes a single ``list_group`` segment whose
    text lists the items as ``"• item"`` lines.  Shorter runs are left as
    individual items.
    """
    result: list[Segment] = []
    i = 0
    while i < len(segments):
        first = segments[i]
        if not _is_candidate(first, short_char_threshold):
            result.append(first)
            i += 1
            continue

        j = i + 1
        while (
            j < len(segments)
            and j - i < group_max
            and _is_candidate(segments[j], short_char_threshold)
            and _same_list(first, segments[j])
        ):
            j += 1

        group = segments[i:j]
        if len(group) < group_min:
            result.append(first)
            i += 1
            continue

        last = group[-1]
        index_range = None
        if first.item_index is not None and last.item_index is not None:
            index_range = (first.item_index, last.item_index)
        result.append(
            replace(
                first,
                chunk_type=ChunkType.LIST_GROUP,
                text="\n".join(f"{GROUP_BULLET}{s.text}" for s in group),
                item_index_range=index_range,
                end_line=last.end_line if last.end_line is not None else first.end_line,
            )
        )
        i = j
    return result
