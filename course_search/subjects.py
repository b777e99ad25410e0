from __future__ import annotations

from typing import List, Optional, Sequence

from loguru import logger

from .pipeline_types import RefType, ScoredRef
from .records import Subject
from .term_dump import DataStore


def find_subject(query: str, subjects: Sequence[Subject]) -> Optional[Subject]:
    """Exact, case-insensitive match on the subject code or its display text."""
    q = query.lower().strip()
    if not q:
        return None
    # linear scan; there are only a couple hundred subjects
    for subject in subjects:
        if q == subject.subject.lower() or q == subject.text.lower():
            return subject
    return None


def match_subject(
    query: str,
    subjects: Sequence[Subject],
    data_store: DataStore,
) -> Optional[List[ScoredRef]]:
    """
    List every class of the subject named by ``query``.

    Returns ``None`` when the query is not a subject.  A subject with no
    classes returns ``[]``, which is still a subject match.  All refs share
    score 0 and keep the data store's order.
    """
    subject = find_subject(query, subjects)
    if subject is None:
        return None

    logger.info("Perfect match for subject: {}", subject.subject)
    return [
        ScoredRef(ref=ref, score=0.0, type=RefType.CLASS)
        for ref in data_store.get_classes_in_subject(subject.subject)
    ]
