from __future__ import annotations

"""
Retrieval over the two full-text indexes.

Classes and employees are scored by independent indexes.  Both return
``(ref, score)`` hits sorted by descending score; ``merge_scored_lists``
interleaves them into one descending stream in a single linear pass.
"""

from typing import List, Sequence

from loguru import logger

from .index import CLASS_SEARCH_CONFIG, EMPLOYEE_SEARCH_CONFIG, FullTextIndex, SearchConfig
from .normalize import prepare_index_query
from .pipeline_types import IndexHit, RefType, ScoredRef
from .records import Subject


# =============================================================================
# Merge
# =============================================================================

def merge_scored_lists(
    class_hits: Sequence[IndexHit],
    employee_hits: Sequence[IndexHit],
) -> List[ScoredRef]:
    """
    Two-pointer merge of two descending lists.

    At each step the higher head wins; on equal scores the employee goes
    first.  Inputs are not modified.
    """
    out: List[ScoredRef] = []
    ci, ei = 0, 0
    n_class, n_emp = len(class_hits), len(employee_hits)

    while ci < n_class and ei < n_emp:
        c, e = class_hits[ci], employee_hits[ei]
        if c.score > e.score:
            out.append(ScoredRef(ref=c.ref, score=c.score, type=RefType.CLASS))
            ci += 1
        else:
            out.append(ScoredRef(ref=e.ref, score=e.score, type=RefType.EMPLOYEE))
            ei += 1

    out.extend(ScoredRef(ref=h.ref, score=h.score, type=RefType.CLASS) for h in class_hits[ci:])
    out.extend(ScoredRef(ref=h.ref, score=h.score, type=RefType.EMPLOYEE) for h in employee_hits[ei:])
    return out


# =============================================================================
# Public API
# =============================================================================

def retrieve_refs(
    query: str,
    subjects: Sequence[Subject],
    class_index: FullTextIndex,
    employee_index: FullTextIndex,
    class_config: SearchConfig = CLASS_SEARCH_CONFIG,
    employee_config: SearchConfig = EMPLOYEE_SEARCH_CONFIG,
) -> List[ScoredRef]:
    """Rewrite ``query`` for the indexes, search both and merge the hits."""
    index_query = prepare_index_query(query, subjects)

    class_hits = class_index.search(index_query, class_config)
    employee_hits = employee_index.search(index_query, employee_config)

    refs = merge_scored_lists(class_hits, employee_hits)
    logger.debug(
        "retrieve_refs: query='{}' index_query='{}' classN={} employeeN={} -> {} refs",
        query, index_query, len(class_hits), len(employee_hits), len(refs),
    )
    return refs
