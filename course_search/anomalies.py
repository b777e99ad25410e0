from __future__ import annotations

"""
Structured anomaly channel for the search pipeline.

Nothing in the ranking path raises to the caller.  Stages report bad input,
missing records and out-of-range values here instead: every anomaly is logged
at WARNING and kept on the request's ``AnomalyLog`` so callers (and tests) can
inspect what went wrong without parsing log text.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from loguru import logger


class AnomalyKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    MISSING_RECORD = "missing_record"
    MISSING_HASH = "missing_hash"
    UNKNOWN_REF_TYPE = "unknown_ref_type"
    CLASS_NUMBER_OVERFLOW = "class_number_overflow"


@dataclass(frozen=True)
class Anomaly:
    kind: AnomalyKind
    message: str
    context: Dict[str, Any] = field(default_factory=dict)


class AnomalyLog:
    """Per-request collector; ``record`` also emits the loguru warning."""

    def __init__(self) -> None:
        self._entries: List[Anomaly] = []

    def record(self, kind: AnomalyKind, message: str, **context: Any) -> Anomaly:
        anomaly = Anomaly(kind=kind, message=message, context=dict(context))
        self._entries.append(anomaly)
        logger.warning("[{}] {} {}", kind.value, message, context)
        return anomaly

    @property
    def entries(self) -> List[Anomaly]:
        return list(self._entries)

    def kinds(self) -> List[AnomalyKind]:
        return [a.kind for a in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
