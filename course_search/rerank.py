# course_search/rerank.py
from __future__ import annotations

import math
import re
from typing import List, Optional, Sequence

from loguru import logger

from . import config
from .anomalies import AnomalyKind, AnomalyLog
from .pipeline_types import ClassResult, EmployeeResult, HydratedResult

_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")


# ---------------------------------------------------------------------------
# Business score
# ---------------------------------------------------------------------------

def parse_class_number(class_id: Optional[str]) -> Optional[int]:
    """
    Integer value of a numeric class id ("2500" -> 2500, "2500.5" -> 2500).
    Returns None for ids that are not a finite number ("XL1", "", None).
    """
    if class_id is None:
        return None
    s = str(class_id).strip()
    if not s:
        return None
    try:
        value = float(s)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    m = _LEADING_INT_RE.match(s)
    if m is None:
        # ".5" and friends: numeric but no integer part
        return 0
    return int(m.group(0))


def taken_seats(result: ClassResult) -> int:
    """Seats plus waitlist spots already taken across all sections."""
    taken = 0
    for section in result.sections:
        taken += section.seats_capacity - section.seats_remaining
        if section.has_waitlist():
            taken += section.wait_capacity - section.wait_remaining
    return taken


def business_score(result: HydratedResult, anomalies: Optional[AnomalyLog] = None) -> int:
    """
    Secondary ranking key used to order results that tie on relevance.

    Tiers, highest first:
      * classes people are enrolled or waitlisted in: taken + 1,000,000
      * numeric class ids with no takers: 10000 - class number
      * oversized class numbers (> 10000): 2
      * non-numeric class ids: 1
      * classes without sections: 0
    Employees get ``EMPLOYEE_BUSINESS_KEY``.
    """
    if isinstance(result, EmployeeResult):
        return config.EMPLOYEE_BUSINESS_KEY

    if not result.sections:
        return config.NO_SECTIONS_KEY

    taken = taken_seats(result)
    if taken > 0:
        return taken + config.ENROLLMENT_TIER_OFFSET

    class_id = result.class_record.class_id if result.class_record is not None else None
    class_num = parse_class_number(class_id)
    if class_num is None:
        return config.NON_NUMERIC_CLASS_KEY

    if class_num > config.CLASS_NUMBER_CEILING:
        if anomalies is not None:
            anomalies.record(
                AnomalyKind.CLASS_NUMBER_OVERFLOW,
                "class number is over the ceiling; ranking it low",
                class_id=class_id,
                ceiling=config.CLASS_NUMBER_CEILING,
            )
        else:
            logger.warning("Class number {} is over {}", class_id, config.CLASS_NUMBER_CEILING)
        return config.OVERSIZED_CLASS_KEY

    return config.CLASS_NUMBER_CEILING - class_num


# ---------------------------------------------------------------------------
# Group-wise re-sort
# ---------------------------------------------------------------------------

def rerank_within_score_groups(
    results: Sequence[HydratedResult],
    anomalies: Optional[AnomalyLog] = None,
) -> List[HydratedResult]:
    """
    Sort each run of equal relevance score by business score, descending.

    Runs stay where they are; only the order inside a run changes.  The sort
    is stable, so equal business scores keep their index order.
    """
    out: List[HydratedResult] = []
    i, n = 0, len(results)
    while i < n:
        j = i + 1
        while j < n and results[j].score == results[i].score:
            j += 1
        run = list(results[i:j])
        if len(run) > 1:
            keyed = [(business_score(r, anomalies), r) for r in run]
            keyed.sort(key=lambda kr: kr[0], reverse=True)
            run = [r for _, r in keyed]
        out.extend(run)
        i = j
    return out
