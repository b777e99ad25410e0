from __future__ import annotations

from typing import Sequence

from .pipeline_types import ScoredRef, Window


def expand_window(refs: Sequence[ScoredRef], min_index: int, max_index: int) -> Window:
    """
    Grow the inclusive ``[min_index, max_index]`` slice of a score-sorted list
    so no score group is cut at either edge.

    Re-ranking only reorders items that share a relevance score, so a group
    straddling a page boundary has to be loaded whole before it is sorted.
    ``max_index`` is clamped to the last position first.
    """
    if not refs:
        raise ValueError("expand_window needs a non-empty ref list")

    last = len(refs) - 1
    min_index = max(0, min(min_index, last))
    max_index = max(min_index, min(max_index, last))

    while min_index > 0 and refs[min_index - 1].score == refs[min_index].score:
        min_index -= 1

    while max_index < last and refs[max_index + 1].score == refs[max_index].score:
        max_index += 1

    return Window(min_index=min_index, max_index=max_index)
