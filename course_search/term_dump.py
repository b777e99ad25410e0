from __future__ import annotations

"""
In-memory term dump: the course/section data store behind the search engine.

The dump is a pre-parsed mapping::

    {
        "subjects": [{"subject": "CS", "text": "Computer Science"}, ...],
        "classes":  [{"host": ..., "termId": ..., "subject": ..., "classUid": ..., "crns": [...]}, ...],
        "sections": [{"host": ..., "termId": ..., "subject": ..., "classUid": ..., "crn": ...}, ...],
    }

Classes and sections are keyed by their record hash (see ``keys``).  The
order of ``classes`` in the dump is the native order returned by
``get_classes_in_subject``.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol

from loguru import logger

from .keys import class_hash, section_record_hash
from .records import ClassRecord, EmployeeRecord, SectionRecord, Subject


class DataStore(Protocol):
    def get_subjects(self) -> List[Subject]: ...

    def get_classes_in_subject(self, subject: str) -> List[str]: ...

    def get_class_from_hash(self, ref: str) -> Optional[ClassRecord]: ...

    def get_section_from_hash(self, ref: str) -> Optional[SectionRecord]: ...


class TermDump:
    def __init__(
        self,
        subjects: List[Subject],
        classes: Dict[str, ClassRecord],
        sections: Dict[str, SectionRecord],
    ):
        self._subjects = list(subjects)
        self._classes = dict(classes)
        self._sections = dict(sections)
        self._by_subject: Dict[str, List[str]] = {}
        for ref, record in self._classes.items():
            self._by_subject.setdefault(record.subject, []).append(ref)

    @classmethod
    def load(cls, dump: Mapping[str, Any]) -> "TermDump":
        """Validate a pre-parsed dump and index it by record hash."""
        subjects = [Subject.model_validate(s) for s in dump.get("subjects") or []]

        classes: Dict[str, ClassRecord] = {}
        for raw in dump.get("classes") or []:
            record = ClassRecord.model_validate(raw)
            key = class_hash(record)
            if key is None:
                logger.warning("Skipping class without a complete key: {}", raw)
                continue
            classes[key] = record

        sections: Dict[str, SectionRecord] = {}
        for raw in dump.get("sections") or []:
            record = SectionRecord.model_validate(raw)
            key = section_record_hash(record)
            if key is None:
                logger.warning("Skipping section without a complete key: {}", raw)
                continue
            sections[key] = record

        logger.info(
            "Loaded term dump: {} subjects, {} classes, {} sections",
            len(subjects), len(classes), len(sections),
        )
        return cls(subjects, classes, sections)

    def get_subjects(self) -> List[Subject]:
        return list(self._subjects)

    def get_classes_in_subject(self, subject: str) -> List[str]:
        return list(self._by_subject.get(subject, []))

    def get_class_from_hash(self, ref: str) -> Optional[ClassRecord]:
        return self._classes.get(ref)

    def get_section_from_hash(self, ref: str) -> Optional[SectionRecord]:
        return self._sections.get(ref)

    def class_refs(self) -> List[str]:
        return list(self._classes)


def load_employee_map(mapping: Mapping[str, Any]) -> Dict[str, EmployeeRecord]:
    """Validate an ``{employee ref: record}`` mapping; records pass through as-is."""
    out: Dict[str, EmployeeRecord] = {}
    for ref, raw in mapping.items():
        if isinstance(raw, EmployeeRecord):
            out[ref] = raw
        else:
            out[ref] = EmployeeRecord.model_validate(raw)
    return out
