"""Typed containers shared across pipeline modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .records import ClassRecord, EmployeeRecord, SectionRecord


class RefType(str, Enum):
    CLASS = "class"
    EMPLOYEE = "employee"


@dataclass(frozen=True)
class IndexHit:
    """One ``(ref, score)`` pair as returned by a full-text index."""

    ref: str
    score: float


@dataclass(frozen=True)
class ScoredRef:
    """A ranked reference to a class or employee record."""

    ref: str
    score: float
    type: RefType


@dataclass(frozen=True)
class Window:
    """Inclusive ``[min_index, max_index]`` slice over a ranked ref list."""

    min_index: int
    max_index: int

    def __len__(self) -> int:
        return max(0, self.max_index - self.min_index + 1)


@dataclass
class CacheEntry:
    refs: Tuple[ScoredRef, ...]
    was_subject_match: bool
    last_access: float


@dataclass
class ClassResult:
    score: float
    class_record: Optional[ClassRecord]
    sections: List[SectionRecord] = field(default_factory=list)

    @property
    def type(self) -> RefType:
        return RefType.CLASS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "type": self.type.value,
            "class": self.class_record.to_wire() if self.class_record is not None else None,
            "sections": [s.to_wire() for s in self.sections],
        }


@dataclass
class EmployeeResult:
    score: float
    employee_record: Optional[EmployeeRecord]

    @property
    def type(self) -> RefType:
        return RefType.EMPLOYEE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "type": self.type.value,
            "employee": self.employee_record.to_wire() if self.employee_record is not None else None,
        }


HydratedResult = Union[ClassResult, EmployeeResult]
